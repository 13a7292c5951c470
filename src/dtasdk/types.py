"""Shared datatypes for the DTA signing SDK."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Union

from dtasdk.errors import InvalidArgumentError


@dataclass(frozen=True)
class Credential:
    secret_key: str
    public_key: str

    def __post_init__(self) -> None:
        for name in ("secret_key", "public_key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InvalidArgumentError(f"Credential {name} must be a non-empty string")

    def __repr__(self) -> str:
        return f"Credential(public_key={self.public_key!r})"


@dataclass(frozen=True)
class AuthenticationHeader:
    algorithm: str
    signed_headers: str
    credential: str
    signature: str


class VerificationFailure(str, Enum):
    """Reasons a request fails verification, in the order they are checked."""

    MISSING_DATE = "missing_date"
    INVALID_DATE = "invalid_date"
    DATE_OUT_OF_RANGE = "date_out_of_range"
    MISSING_AUTHORIZATION = "missing_authorization"
    MALFORMED_AUTHORIZATION = "malformed_authorization"
    MALFORMED_CREDENTIAL = "malformed_credential"
    UNKNOWN_CREDENTIAL = "unknown_credential"
    MISSING_SIGNED_HEADER = "missing_signed_header"
    SIGNING_FAILURE = "signing_failure"
    SIGNATURE_MISMATCH = "signature_mismatch"


@dataclass(frozen=True)
class VerifyResult:
    valid: bool
    public_key: str | None = None
    reason: VerificationFailure | None = None

    def __bool__(self) -> bool:
        return self.valid


HeaderInput = Union[Dict[str, str], List[Tuple[str, str]]]
