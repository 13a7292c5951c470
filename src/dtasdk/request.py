"""Request abstraction consumed and mutated by the signer."""

from __future__ import annotations

from typing import Iterator, MutableMapping, Protocol, Tuple
from urllib.parse import urlsplit

from dtasdk.errors import InvalidArgumentError
from dtasdk.types import HeaderInput

CONTENT_TYPE_HEADER = "Content-Type"
USER_AGENT_HEADER = "User-Agent"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Amazon Instant Access/1.0"


class HeaderMap(MutableMapping[str, str]):
    """Case-insensitive, insertion-ordered header mapping.

    The spelling used when a name is first set is kept for iteration.
    """

    def __init__(self, headers: HeaderInput | None = None):
        self._items: dict[str, Tuple[str, str]] = {}
        if headers is None:
            return
        entries = headers.items() if isinstance(headers, dict) else headers
        for entry in entries:
            if len(entry) != 2:
                raise InvalidArgumentError("Header entries must be (name, value)")
            self[str(entry[0])] = str(entry[1])

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        existing = self._items.get(key)
        self._items[key] = (existing[0] if existing else name, value)

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"HeaderMap({dict(self.items())!r})"

    def copy(self) -> "HeaderMap":
        return HeaderMap(list(self.items()))


class SignableRequest(Protocol):
    method: str
    url: str
    headers: MutableMapping[str, str]
    body: str | None


def _require_absolute(url: str) -> str:
    if not isinstance(url, str):
        raise InvalidArgumentError("url must be a string")
    try:
        parts = urlsplit(url)
    except ValueError as error:
        raise InvalidArgumentError(f"url is incorrectly formatted: {error}") from error
    if not parts.scheme or not parts.netloc:
        raise InvalidArgumentError("url must be an absolute URI")
    return url


class Request:
    def __init__(
        self,
        url: str,
        method: str = "POST",
        content_type: str | None = None,
        body: str | None = None,
        headers: HeaderInput | None = None,
    ):
        if not method or not isinstance(method, str):
            raise InvalidArgumentError("method is required")
        self.url = _require_absolute(url)
        self.method = method.upper()
        self.body = body
        self.headers = HeaderMap(headers)
        if content_type is not None:
            self.headers[CONTENT_TYPE_HEADER] = content_type

    @classmethod
    def from_incoming(
        cls,
        url: str,
        method: str,
        headers: HeaderInput | None,
        body: bytes | str | None = None,
    ) -> "Request":
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        return cls(url, method=method, headers=headers, body=body)

    def copy(self) -> "Request":
        clone = Request(self.url, method=self.method, body=self.body)
        clone.headers = self.headers.copy()
        return clone

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, url={self.url!r}, headers={list(self.headers)!r})"
