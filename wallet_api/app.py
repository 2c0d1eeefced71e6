"""
Robyn application factory and server entry point.
Example: wallet-api .env.local
"""
import logging
import sys

from robyn import Robyn

from wallet_api.config import Settings, load_settings
from wallet_api.routes.health import register_health_routes
from wallet_api.routes.mptoken import register_mptoken_routes
from wallet_api.routes.xaman import register_xaman_routes
from wallet_api.services.xaman import PayloadService, XamanClient
from wallet_api.services.xrpl_mptoken import build_ledger_client

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    *,
    app=None,
    payload_service: PayloadService | None = None,
    ledger_client=None,
):
    """
    Build the app with its collaborators.
    payload_service / ledger_client default to the real Xaman and XRPL clients built from settings.
    """
    if app is None:
        app = Robyn(__file__)
    if payload_service is None:
        payload_service = XamanClient(
            settings.xaman_api_key,
            settings.xaman_api_secret,
            base_url=settings.xaman_base_url,
        )
    if ledger_client is None:
        ledger_client = build_ledger_client(settings.xrpl_network_url)

    register_health_routes(app)
    register_xaman_routes(app, payload_service, settings)
    register_mptoken_routes(app, payload_service, ledger_client)
    return app


def main() -> None:
    # Optional: wallet-api [.env.local]
    env_file = sys.argv[1] if len(sys.argv) > 1 else None
    settings = load_settings(env_file)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "starting wallet api",
        extra={
            "host": settings.host,
            "port": settings.port,
            "xaman_base_url": settings.xaman_base_url,
            "xrpl_network_url": settings.xrpl_network_url,
        },
    )
    app = create_app(settings)
    app.start(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
