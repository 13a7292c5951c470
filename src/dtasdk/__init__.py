"""DTA SDK: DTA1-HMAC-SHA256 request signing and verification."""

from dtasdk.auth_header import format_authentication_header, parse_authentication_header
from dtasdk.client import InstantAccessClient
from dtasdk.clock import Clock, FixedClock, SequenceClock, SystemClock
from dtasdk.credentials import (
    CREDENTIALS_FILE_ENV,
    CredentialLookup,
    CredentialStore,
    load_default_store,
    parse_credentials,
)
from dtasdk.dispatch import HttpResponse, InstantAccessDispatcher, decode_instant_access_request
from dtasdk.models import (
    FulfillPurchaseResponse,
    FulfillPurchaseResult,
    GetUserIdRequest,
    GetUserIdResponse,
    GetUserIdResult,
    InstantAccessOperation,
    InstantAccessRequest,
    PurchaseRequest,
    RevokePurchaseResponse,
    RevokePurchaseResult,
    SubscriptionActivateRequest,
    SubscriptionDeactivateRequest,
    SubscriptionPeriod,
    SubscriptionReason,
    SubscriptionRequest,
    SubscriptionResponse,
    SubscriptionResult,
)
from dtasdk.errors import (
    CredentialNotFoundError,
    DTASDKError,
    InvalidArgumentError,
    InvalidCredentialFormatError,
    SigningError,
)
from dtasdk.request import HeaderMap, Request, SignableRequest
from dtasdk.signer import (
    ALGORITHM,
    AUTHORIZATION_HEADER,
    DEFAULT_TOLERANCE,
    X_AMZ_DATE_HEADER,
    Signer,
    sign_request,
    verify_request,
)
from dtasdk.types import (
    AuthenticationHeader,
    Credential,
    VerificationFailure,
    VerifyResult,
)

__all__ = [
    "ALGORITHM",
    "AUTHORIZATION_HEADER",
    "AuthenticationHeader",
    "CREDENTIALS_FILE_ENV",
    "Clock",
    "Credential",
    "CredentialLookup",
    "CredentialNotFoundError",
    "CredentialStore",
    "DEFAULT_TOLERANCE",
    "DTASDKError",
    "FixedClock",
    "FulfillPurchaseResponse",
    "FulfillPurchaseResult",
    "GetUserIdRequest",
    "GetUserIdResponse",
    "GetUserIdResult",
    "HeaderMap",
    "HttpResponse",
    "InstantAccessClient",
    "InstantAccessDispatcher",
    "InstantAccessOperation",
    "InstantAccessRequest",
    "InvalidArgumentError",
    "InvalidCredentialFormatError",
    "PurchaseRequest",
    "Request",
    "RevokePurchaseResponse",
    "RevokePurchaseResult",
    "SequenceClock",
    "SignableRequest",
    "Signer",
    "SigningError",
    "SubscriptionActivateRequest",
    "SubscriptionDeactivateRequest",
    "SubscriptionPeriod",
    "SubscriptionReason",
    "SubscriptionRequest",
    "SubscriptionResponse",
    "SubscriptionResult",
    "SystemClock",
    "VerificationFailure",
    "VerifyResult",
    "X_AMZ_DATE_HEADER",
    "decode_instant_access_request",
    "format_authentication_header",
    "load_default_store",
    "parse_authentication_header",
    "parse_credentials",
    "sign_request",
    "verify_request",
]

__version__ = "0.0.1"
