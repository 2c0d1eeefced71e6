"""
MPToken subscription routes.
Opt-in: the holder signs an MPTokenAuthorize in Xaman before the issuer can send subscription tokens.
Holdings: which MPToken issuances an account currently holds, read from the validated ledger.
"""
import logging

from robyn.robyn import Request, Response

from wallet_api.exceptions import XamanAPIError
from wallet_api.routes.xaman import request_json
from wallet_api.services import xrpl_mptoken
from wallet_api.services.responses import (
    build_error_response,
    build_exception_response,
    build_success_response,
    error_message,
)
from wallet_api.services.xaman import (
    PayloadService,
    build_optin_payload,
    summarize_descriptor,
    summarize_status,
)

logger = logging.getLogger(__name__)

OPTIN_REQUIRED_FIELDS = ["userAddress", "issuanceId", "serviceId", "serviceName"]


def upstream_status(exc: BaseException) -> int:
    """HTTP status Xaman answered with, or 500 for anything that is not a Xaman API error."""
    if isinstance(exc, XamanAPIError) and exc.status_code:
        return exc.status_code
    return 500


def register_mptoken_routes(app, payload_service: PayloadService, ledger_client) -> None:
    """Register MPToken opt-in and holdings routes."""

    @app.post("/api/mptoken/optin/create")
    async def create_optin(request: Request) -> Response:
        try:
            body = request_json(request)
        except Exception as exc:
            return build_error_response(f"Invalid JSON: {error_message(exc)}")
        if not isinstance(body, dict):
            return build_error_response("Request body must be a JSON object")

        missing_fields = [field for field in OPTIN_REQUIRED_FIELDS if not body.get(field)]
        if missing_fields:
            return build_error_response(f"Missing required fields: {', '.join(OPTIN_REQUIRED_FIELDS)}")

        user_address = str(body["userAddress"]).strip()
        if not xrpl_mptoken.is_valid_xrpl_address(user_address):
            return build_error_response("Invalid XRPL address")

        payload = build_optin_payload(
            user_address,
            str(body["issuanceId"]).strip(),
            str(body["serviceId"]),
            str(body["serviceName"]),
        )
        logger.info(
            "mptoken create_optin: creating MPTokenAuthorize payload",
            extra={
                "account": user_address,
                "issuance_id": payload["txjson"]["MPTokenIssuanceID"],
                "identifier": payload["custom_meta"]["identifier"],
            },
        )
        try:
            descriptor = await payload_service.create_payload(payload)
        except Exception as exc:
            logger.exception("mptoken create_optin: failed for %s", user_address)
            return build_exception_response(exc, status_code=upstream_status(exc))
        return build_success_response(summarize_descriptor(descriptor or {}))

    @app.get("/api/mptoken/optin/status/:uuid")
    async def optin_status(request: Request) -> Response:
        payload_uuid = request.path_params.get("uuid", "")
        if not payload_uuid:
            return build_error_response("Payload UUID is required")
        try:
            status = await payload_service.get_payload_status(payload_uuid)
        except Exception as exc:
            logger.exception("mptoken optin_status: failed for %s", payload_uuid)
            return build_exception_response(exc, status_code=upstream_status(exc))
        return build_success_response(summarize_status(status or {}))

    @app.get("/api/mptoken/holdings/:account")
    async def holdings(request: Request) -> Response:
        """
        List MPToken balances of :account.
        With ?issuance_id=<hex>, also report whether the account holds at least 1 unit of it.
        """
        account = (request.path_params.get("account", "") or "").strip()
        if not xrpl_mptoken.is_valid_xrpl_address(account):
            return build_error_response("Invalid XRPL address")
        issuance_id = request.query_params.get("issuance_id", None)
        try:
            tokens = await xrpl_mptoken.list_mptoken_holdings(ledger_client, account)
        except Exception as exc:
            logger.error(
                "mptoken holdings: request failed for %s: type=%s repr=%s",
                account[:16],
                type(exc).__name__,
                repr(exc),
                exc_info=True,
            )
            return build_exception_response(exc)

        data = {"account": account, "tokens": tokens}
        if issuance_id:
            data["holds"] = xrpl_mptoken.holds_issuance(tokens, issuance_id)
        return build_success_response(data)
