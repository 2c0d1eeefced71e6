"""
Xaman payload proxy.
The browser never sees the Xaman API secret: it asks this server to create a payload, then polls
check-payload until the user signs, rejects or lets it expire in the Xaman app.
"""
import json
import logging

from robyn.robyn import Request, Response

from wallet_api.config import Settings
from wallet_api.services.responses import (
    build_error_response,
    build_exception_response,
    build_success_response,
    error_message,
)
from wallet_api.services.xaman import PayloadService, build_payment_payload

logger = logging.getLogger(__name__)

# Substring of the upstream error message -> HTTP status for create-payment, checked in order.
PAYMENT_ERROR_STATUS = (
    ("API key", 401),
    ("network", 503),
    ("Account", 400),
)


def request_json(request: Request):
    """Parse the request body. Raises on malformed JSON; a JSON string body is decoded once more."""
    body = request.json()
    if isinstance(body, (str, bytes)):
        body = json.loads(body)
    return body


def payment_error_status(exc: BaseException) -> int:
    message = str(exc)
    for needle, status_code in PAYMENT_ERROR_STATUS:
        if needle in message:
            return status_code
    return 500


def register_xaman_routes(app, payload_service: PayloadService, settings: Settings) -> None:
    """Register the Xaman payload create/check routes."""

    @app.post("/api/xaman/create-payload")
    async def create_payload(request: Request) -> Response:
        """Forward the body unmodified to Xaman and return the payload descriptor."""
        try:
            body = request.json()
            logger.debug("xaman create_payload: request body %s", body)
            descriptor = await payload_service.create_payload(body)
            payload_uuid = descriptor.get("uuid") if isinstance(descriptor, dict) else None
            logger.info("xaman create_payload: payload created", extra={"uuid": payload_uuid})
            return build_success_response(descriptor)
        except Exception as exc:
            logger.exception("xaman create_payload: failed")
            return build_exception_response(exc)

    @app.get("/api/xaman/check-payload")
    async def check_payload(request: Request) -> Response:
        """Relay the current resolution state of ?uuid=<payload uuid>."""
        payload_uuid = request.query_params.get("uuid", None)
        if not payload_uuid:
            return build_error_response("Payload UUID is required", status_code=400)
        try:
            status = await payload_service.get_payload_status(payload_uuid)
            return build_success_response(status)
        except Exception as exc:
            logger.exception("xaman check_payload: failed for %s", payload_uuid)
            return build_exception_response(exc)

    @app.post("/api/xaman/create-payment")
    async def create_payment(request: Request) -> Response:
        """
        Create a Payment payload that Xaman submits after signing.

        Body:
            txjson (dict): Payment transaction fields (Destination, Amount, ...).

        Returns:
            The payload descriptor; the txjson gets a random DestinationTag and the configured
            expiry, network and return URL options.
        """
        try:
            body = request_json(request)
        except Exception as exc:
            return build_error_response(f"Invalid JSON: {error_message(exc)}")

        txjson = body.get("txjson") if isinstance(body, dict) else None
        if not isinstance(txjson, dict):
            return build_error_response("txjson is required")

        payload = build_payment_payload(
            txjson,
            app_url=settings.app_url,
            expire=settings.xaman_payload_expire,
            force_network=settings.xaman_force_network,
        )
        logger.info(
            "xaman create_payment: creating payload",
            extra={
                "destination": txjson.get("Destination"),
                "destination_tag": payload["txjson"]["DestinationTag"],
                "force_network": settings.xaman_force_network,
            },
        )
        try:
            descriptor = await payload_service.create_payload(payload)
        except Exception as exc:
            logger.exception("xaman create_payment: failed")
            return build_exception_response(exc, status_code=payment_error_status(exc))

        if not isinstance(descriptor, dict) or not descriptor.get("uuid"):
            logger.error("xaman create_payment: response has no uuid: %s", descriptor)
            return build_error_response("Invalid response from Xaman API: missing payload uuid", status_code=500)

        logger.info("xaman create_payment: payload created", extra={"uuid": descriptor["uuid"]})
        return build_success_response(descriptor)
