"""Exceptions raised by the DTA signing SDK."""

from __future__ import annotations


class DTASDKError(Exception):
    """Base class for all SDK errors."""


class InvalidArgumentError(DTASDKError, ValueError):
    pass


class InvalidCredentialFormatError(DTASDKError, ValueError):
    pass


class CredentialNotFoundError(DTASDKError, KeyError):
    def __init__(self, public_key: str):
        super().__init__(f"Credential not found for public key: {public_key}")
        self.public_key = public_key

    def __str__(self) -> str:
        return str(self.args[0])


class SigningError(DTASDKError):
    """Raised when a request cannot be canonicalized or signed.

    The original fault is chained as ``__cause__``.
    """
