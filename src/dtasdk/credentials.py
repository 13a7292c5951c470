"""In-memory credential store and the line-oriented credential file loader."""

from __future__ import annotations

import os
import re
import threading
from pathlib import Path
from typing import IO, Iterator, Protocol, Union

import structlog

from dtasdk.errors import (
    CredentialNotFoundError,
    InvalidArgumentError,
    InvalidCredentialFormatError,
)
from dtasdk.types import Credential

logger = structlog.get_logger(__name__)

CREDENTIALS_FILE_ENV = "DTASDK_CREDENTIALS_FILE"

_LINE_BREAK = re.compile(r"\r?\n")
_BYTE_ORDER_MARK = "\ufeff"


class CredentialLookup(Protocol):
    def try_get(self, public_key: str) -> Credential | None: ...


def parse_credentials(contents: str) -> list[Credential]:
    """Parse ``<secretKey> <publicKey>`` lines, skipping blank ones."""
    if not isinstance(contents, str):
        raise InvalidArgumentError("Credential contents must be a string")
    if not contents.strip():
        raise InvalidCredentialFormatError("Invalid keys: credential contents are empty")

    credentials: list[Credential] = []
    for number, line in enumerate(_LINE_BREAK.split(contents), start=1):
        if not line.strip():
            continue
        tokens = line.split()
        if len(tokens) < 2:
            raise InvalidCredentialFormatError(f"Invalid credentials format found on line {number}")
        credentials.append(Credential(secret_key=tokens[0], public_key=tokens[1]))
    return credentials


class CredentialStore:
    """Maps public keys to credentials. Adding an existing public key replaces it."""

    def __init__(self, credentials: list[Credential] | None = None):
        self._store: dict[str, Credential] = {}
        self._lock = threading.Lock()
        for credential in credentials or []:
            self.add(credential)

    def add(self, credential: Credential) -> None:
        if not isinstance(credential, Credential):
            raise InvalidArgumentError("credential must be a Credential")
        with self._lock:
            self._store[credential.public_key] = credential

    def remove(self, public_key: str) -> None:
        with self._lock:
            self._store.pop(public_key, None)

    def get(self, public_key: str) -> Credential:
        credential = self.try_get(public_key)
        if credential is None:
            raise CredentialNotFoundError(public_key)
        return credential

    def try_get(self, public_key: str) -> Credential | None:
        with self._lock:
            return self._store.get(public_key)

    def public_keys(self) -> list[str]:
        with self._lock:
            return list(self._store)

    def __getitem__(self, public_key: str) -> Credential:
        return self.get(public_key)

    def __contains__(self, public_key: object) -> bool:
        with self._lock:
            return public_key in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self.public_keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def load_from_text(self, contents: str) -> None:
        credentials = parse_credentials(contents)
        with self._lock:
            for credential in credentials:
                self._store[credential.public_key] = credential
        logger.info("Loaded credentials", count=len(credentials))

    def load_from_stream(self, stream: IO[str] | IO[bytes]) -> None:
        if stream is None:
            raise InvalidArgumentError("Invalid keys: stream is required")
        contents = stream.read()
        if isinstance(contents, bytes):
            contents = contents.decode("utf-8-sig")
        elif isinstance(contents, str):
            contents = contents.removeprefix(_BYTE_ORDER_MARK)
        self.load_from_text(contents)

    def load_from_path(self, path: Union[str, os.PathLike]) -> None:
        file_path = Path(path)
        if not file_path.is_file():
            raise InvalidArgumentError(f"{file_path} must be a path to an existing file")
        with file_path.open("r", encoding="utf-8-sig", newline="") as stream:
            self.load_from_stream(stream)


def resolve_credentials_path(explicit_path: str | None = None) -> str:
    path = explicit_path or os.environ.get(CREDENTIALS_FILE_ENV)
    if not path:
        raise InvalidArgumentError(
            f"No credential file given. Pass a path or set {CREDENTIALS_FILE_ENV}.",
        )
    return path


def load_default_store(path: str | None = None) -> CredentialStore:
    store = CredentialStore()
    store.load_from_path(resolve_credentials_path(path))
    return store
