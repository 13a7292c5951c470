"""Parser for the DTA ``Authorization`` header value."""

from __future__ import annotations

import re

from dtasdk.types import AuthenticationHeader

# Only the first Credential/Signature pair is captured; any that follow are ignored.
_AUTHENTICATION_HEADER_PATTERN = re.compile(
    r"(\S+) SignedHeaders=(\S+), Credential=(\S+), Signature=([^\s,]+)",
)


def parse_authentication_header(value: str | None) -> AuthenticationHeader | None:
    if not value or not isinstance(value, str):
        return None
    match = _AUTHENTICATION_HEADER_PATTERN.search(value)
    if not match:
        return None
    algorithm, signed_headers, credential, signature = match.groups()
    return AuthenticationHeader(
        algorithm=algorithm,
        signed_headers=signed_headers,
        credential=credential,
        signature=signature,
    )


def format_authentication_header(header: AuthenticationHeader) -> str:
    return (
        f"{header.algorithm} SignedHeaders={header.signed_headers}, "
        f"Credential={header.credential}, Signature={header.signature}"
    )
