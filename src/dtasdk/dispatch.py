"""Framework-neutral inbound handling for Instant Access callbacks.

Each inbound request is verified before its JSON payload is looked at:
an unverifiable or undecodable request gets 403, a handler failure gets 500,
and a handler result is returned as JSON with 200.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import structlog

from dtasdk.errors import InvalidArgumentError
from dtasdk.models import REQUEST_TYPES, InstantAccessOperation, InstantAccessRequest
from dtasdk.request import Request
from dtasdk.serialization import from_json, from_jsonable, to_json
from dtasdk.signer import Credentials, Signer
from dtasdk.types import HeaderInput

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"

OperationHandler = Callable[[InstantAccessRequest], Any]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


def decode_instant_access_request(content: str) -> InstantAccessRequest:
    payload = from_json(content)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    operation = InstantAccessOperation.parse(payload.get("operation"))
    return from_jsonable(REQUEST_TYPES[operation], {**payload, "operation": operation})


class InstantAccessDispatcher:
    def __init__(
        self,
        credentials: Credentials,
        handlers: Mapping[InstantAccessOperation, OperationHandler],
        signer: Signer | None = None,
    ):
        self._credentials = credentials
        self._handlers = dict(handlers)
        self._signer = signer or Signer()

    def handle(
        self,
        url: str,
        method: str,
        headers: HeaderInput,
        body: bytes | str | None,
    ) -> HttpResponse:
        try:
            request = Request.from_incoming(url, method, headers, body)
        except (UnicodeDecodeError, InvalidArgumentError) as error:
            logger.warning("Rejected malformed request", url=url, error=str(error))
            return HttpResponse(status=403)

        result = self._signer.check(request, self._credentials)
        if not result.valid:
            logger.warning(
                "Rejected unsigned or invalid request",
                url=url,
                reason=result.reason.value if result.reason else None,
            )
            return HttpResponse(status=403)

        try:
            instant_access_request = decode_instant_access_request(request.body or "")
            handler = self._handlers.get(instant_access_request.operation)
            if handler is None:
                raise ValueError(f"Operation[{instant_access_request.operation.name}] is not supported")

            response = handler(instant_access_request)
            return HttpResponse(
                status=200,
                body=to_json(response),
                headers={"Content-Type": JSON_CONTENT_TYPE},
            )
        except Exception as error:  # noqa: BLE001
            logger.exception("Instant Access request failed", url=url, error=str(error))
            return HttpResponse(status=500)
