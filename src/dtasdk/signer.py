"""DTA1-HMAC-SHA256 request signing and verification.

A signed request carries two headers::

    x-amz-date: 20110909T233600Z
    Authorization: DTA1-HMAC-SHA256 SignedHeaders=content-type;x-amz-date,
        Credential=KEYID/20110909, Signature=<64 hex chars>

The signature is an HMAC over a canonical form of the request, keyed with a
per-day key derived from the shared secret. Signing covers every header present
at sign time; verification rebuilds the canonical form from only the headers
named in ``SignedHeaders``, so headers added in transit do not break it.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, MutableMapping, Sequence, Tuple, Union
from urllib.parse import quote, urlsplit

import structlog
from nacl.encoding import HexEncoder
from nacl.hash import sha256

from dtasdk.auth_header import parse_authentication_header
from dtasdk.clock import Clock, SystemClock, as_utc
from dtasdk.credentials import CredentialLookup, CredentialStore
from dtasdk.errors import SigningError
from dtasdk.request import SignableRequest
from dtasdk.types import Credential, VerificationFailure, VerifyResult

logger = structlog.get_logger(__name__)

ALGORITHM = "DTA1-HMAC-SHA256"
X_AMZ_DATE_HEADER = "x-amz-date"
AUTHORIZATION_HEADER = "Authorization"
DATE_FORMAT = "%Y%m%d"
DATE_TIME_FORMAT = "%Y%m%dT%H%M%SZ"
DEFAULT_TOLERANCE = timedelta(minutes=15)

_DATE_TIME_PATTERN = re.compile(r"[0-9]{8}T[0-9]{6}Z")
_WHITESPACE = re.compile(r"\s+")
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"

Header = Tuple[str, str]
Credentials = Union[CredentialLookup, Credential]


def _normalize_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def _hex_sha256(value: str | bytes) -> str:
    data = value.encode("utf-8") if isinstance(value, str) else value
    return sha256(data, encoder=HexEncoder).decode("ascii")


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def _find_header(headers: MutableMapping[str, str], name: str) -> str | None:
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _remove_header(headers: MutableMapping[str, str], name: str) -> None:
    lowered = name.lower()
    for key in [key for key in headers if key.lower() == lowered]:
        del headers[key]


def _set_header(headers: MutableMapping[str, str], name: str, value: str) -> None:
    _remove_header(headers, name)
    headers[name] = value


def canonical_path(url: str) -> str:
    try:
        path = urlsplit(url).path
    except (TypeError, ValueError, AttributeError) as error:
        raise SigningError(f"Malformed request URL: {url!r}") from error
    return quote(path or "/", safe=_PATH_SAFE)


def canonical_headers(headers: Iterable[Header]) -> str:
    return "".join(
        f"{_normalize_whitespace(name).lower()}:{_normalize_whitespace(str(value))}\n"
        for name, value in headers
    )


def signed_header_names(headers: Iterable[Header]) -> str:
    return ";".join(name.lower() for name, _ in headers)


def build_canonical_request(
    method: str,
    url: str,
    headers: Sequence[Header],
    signed_headers: str,
    body: str | bytes | None,
) -> str:
    return "\n".join([
        method.upper(),
        canonical_path(url),
        "",
        canonical_headers(headers),
        signed_headers,
        _hex_sha256(body or ""),
    ])


def build_string_to_sign(date_time: str, canonical_request: str) -> str:
    return "\n".join([ALGORITHM, date_time, "", _hex_sha256(canonical_request)])


def derive_signing_key(secret_key: str, date: str) -> bytes:
    return _hmac_sha256(secret_key.encode("utf-8"), date)


def compute_signature(
    secret_key: str,
    date: str,
    date_time: str,
    canonical_request: str,
) -> str:
    signing_key = derive_signing_key(secret_key, date)
    return _hmac_sha256(signing_key, build_string_to_sign(date_time, canonical_request)).hex()


def format_authorization(signed_headers: str, public_key: str, date: str, signature: str) -> str:
    return (
        f"{ALGORITHM} SignedHeaders={signed_headers}, "
        f"Credential={public_key}/{date}, Signature={signature}"
    )


def parse_request_date(value: str | None) -> datetime | None:
    if not value or not _DATE_TIME_PATTERN.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, DATE_TIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


class Signer:
    def __init__(self, clock: Clock | None = None, tolerance: timedelta = DEFAULT_TOLERANCE):
        self.clock = clock or SystemClock()
        self.tolerance = tolerance

    def sign(self, request: SignableRequest, credential: Credential) -> None:
        """Add ``x-amz-date`` and ``Authorization`` headers to ``request`` in place."""
        now = as_utc(self.clock.now())
        date = now.strftime(DATE_FORMAT)
        date_time = now.strftime(DATE_TIME_FORMAT)

        headers = request.headers
        _set_header(headers, X_AMZ_DATE_HEADER, date_time)
        _remove_header(headers, AUTHORIZATION_HEADER)

        headers_to_sign = sorted(headers.items(), key=lambda item: item[0].lower())
        signed_headers = signed_header_names(headers_to_sign)
        signature = self._signature(request, headers_to_sign, signed_headers, credential, date, date_time)

        headers[AUTHORIZATION_HEADER] = format_authorization(
            signed_headers, credential.public_key, date, signature,
        )

    def verify(self, request: SignableRequest, credentials: Credentials) -> bool:
        return self.check(request, credentials).valid

    def check(self, request: SignableRequest, credentials: Credentials) -> VerifyResult:
        """Verify ``request`` and report the first failed step, if any."""
        if isinstance(credentials, Credential):
            credentials = CredentialStore([credentials])
        headers = request.headers

        request_time = self._request_time(headers)
        if isinstance(request_time, VerificationFailure):
            return self._reject(request_time)

        authorization = _find_header(headers, AUTHORIZATION_HEADER)
        if not authorization:
            return self._reject(VerificationFailure.MISSING_AUTHORIZATION)

        authentication_header = parse_authentication_header(authorization)
        if authentication_header is None:
            return self._reject(VerificationFailure.MALFORMED_AUTHORIZATION)

        credential_info = authentication_header.credential.split("/")
        if len(credential_info) < 2:
            return self._reject(VerificationFailure.MALFORMED_CREDENTIAL)

        public_key = credential_info[0]
        credential = credentials.try_get(public_key)
        if credential is None:
            return self._reject(VerificationFailure.UNKNOWN_CREDENTIAL, public_key)

        signed_headers = authentication_header.signed_headers
        headers_to_sign = self._headers_to_sign(signed_headers, headers)
        if headers_to_sign is None:
            return self._reject(VerificationFailure.MISSING_SIGNED_HEADER, public_key)

        date = request_time.strftime(DATE_FORMAT)
        date_time = request_time.strftime(DATE_TIME_FORMAT)
        try:
            signature = self._signature(
                request, headers_to_sign, signed_headers, credential, date, date_time,
            )
        except SigningError:
            return self._reject(VerificationFailure.SIGNING_FAILURE, public_key)

        expected = format_authorization(signed_headers, credential.public_key, date, signature)
        if not hmac.compare_digest(
            expected.encode("utf-8", "surrogatepass"),
            authorization.encode("utf-8", "surrogatepass"),
        ):
            return self._reject(VerificationFailure.SIGNATURE_MISMATCH, public_key)

        return VerifyResult(valid=True, public_key=public_key)

    def _request_time(self, headers: MutableMapping[str, str]) -> datetime | VerificationFailure:
        raw = _find_header(headers, X_AMZ_DATE_HEADER)
        if not raw:
            return VerificationFailure.MISSING_DATE
        request_time = parse_request_date(raw)
        if request_time is None:
            return VerificationFailure.INVALID_DATE
        now = as_utc(self.clock.now())
        if abs(now - request_time) > self.tolerance:
            return VerificationFailure.DATE_OUT_OF_RANGE
        return request_time

    @staticmethod
    def _headers_to_sign(signed_headers: str, headers: MutableMapping[str, str]) -> list[Header] | None:
        headers_to_sign: list[Header] = []
        for name in signed_headers.split(";"):
            value = _find_header(headers, name)
            if value is None:
                return None
            headers_to_sign.append((name, value))
        return headers_to_sign

    @staticmethod
    def _signature(
        request: SignableRequest,
        headers_to_sign: Sequence[Header],
        signed_headers: str,
        credential: Credential,
        date: str,
        date_time: str,
    ) -> str:
        try:
            canonical_request = build_canonical_request(
                request.method,
                request.url,
                headers_to_sign,
                signed_headers,
                request.body,
            )
            return compute_signature(credential.secret_key, date, date_time, canonical_request)
        except SigningError:
            raise
        except (TypeError, ValueError, AttributeError, UnicodeError) as error:
            raise SigningError(f"Unable to sign request: {error}") from error

    @staticmethod
    def _reject(reason: VerificationFailure, public_key: str | None = None) -> VerifyResult:
        logger.debug("Request verification failed", reason=reason.value, public_key=public_key)
        return VerifyResult(valid=False, public_key=public_key, reason=reason)


def sign_request(request: SignableRequest, credential: Credential, clock: Clock | None = None) -> None:
    Signer(clock=clock).sign(request, credential)


def verify_request(
    request: SignableRequest,
    credentials: Credentials,
    clock: Clock | None = None,
) -> bool:
    return Signer(clock=clock).verify(request, credentials)
