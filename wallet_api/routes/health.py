from datetime import datetime, timezone

from robyn.robyn import Request, Response

from wallet_api.services.responses import json_response

SERVICE_NAME = "Subscription wallet API"


def register_health_routes(app) -> None:
    @app.get("/api/health")
    async def health(request: Request) -> Response:
        """No-auth liveness check."""
        return json_response(
            200,
            {
                "status": "OK",
                "service": SERVICE_NAME,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
