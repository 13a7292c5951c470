"""Instant Access callback payloads and their result codes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InstantAccessOperation(str, Enum):
    GetUserId = "GetUserId"
    Purchase = "Purchase"
    Revoke = "Revoke"
    SubscriptionActivate = "SubscriptionActivate"
    SubscriptionDeactivate = "SubscriptionDeactivate"

    @classmethod
    def parse(cls, value: object) -> "InstantAccessOperation":
        if isinstance(value, str):
            for operation in cls:
                if operation.name.lower() == value.lower():
                    return operation
        raise ValueError(f"Unknown Instant Access operation: {value!r}")


class SubscriptionReason(str, Enum):
    NOT_RENEWED = "NOT_RENEWED"
    USER_REQUEST = "USER_REQUEST"
    CUSTOMER_SERVICE_REQUEST = "CUSTOMER_SERVICE_REQUEST"
    PAYMENT_PROBLEM = "PAYMENT_PROBLEM"
    TESTING = "TESTING"
    UNABLE_TO_FULFILL = "UNABLE_TO_FULFILL"


class SubscriptionPeriod(str, Enum):
    FREE_TRIAL = "FREE_TRIAL"
    GRACE_PERIOD = "GRACE_PERIOD"
    NOT_STARTED = "NOT_STARTED"
    REGULAR = "REGULAR"


class GetUserIdResult(str, Enum):
    OK = "OK"
    FAILED_ACCOUNT_INVALID = "FAILED_ACCOUNT_INVALID"


class FulfillPurchaseResult(str, Enum):
    OK = "OK"
    FAIL_USER_NOT_ELIGIBLE = "FAIL_USER_NOT_ELIGIBLE"
    FAIL_USER_INVALID = "FAIL_USER_INVALID"
    FAIL_OTHER = "FAIL_OTHER"


class RevokePurchaseResult(str, Enum):
    OK = "OK"
    FAILED_USER_INVALID = "FAILED_USER_INVALID"
    FAILED_INVALID_PURCHASETOKEN = "FAILED_INVALID_PURCHASETOKEN"
    FAIL_OTHER = "FAIL_OTHER"


class SubscriptionResult(str, Enum):
    OK = "OK"
    FAIL_USER_NOT_ELIGIBLE = "FAIL_USER_NOT_ELIGIBLE"
    FAIL_USER_INVALID = "FAIL_USER_INVALID"
    FAIL_INVALID_SUBSCRIPTION = "FAIL_INVALID_SUBSCRIPTION"
    FAIL_OTHER = "FAIL_OTHER"


@dataclass(frozen=True)
class InstantAccessRequest:
    operation: InstantAccessOperation


@dataclass(frozen=True)
class GetUserIdRequest(InstantAccessRequest):
    info_field1: Optional[str] = None
    info_field2: Optional[str] = None
    info_field3: Optional[str] = None


@dataclass(frozen=True)
class PurchaseRequest(InstantAccessRequest):
    purchase_token: Optional[str] = None
    user_id: Optional[str] = None
    product_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class SubscriptionRequest(InstantAccessRequest):
    subscription_id: Optional[str] = None


@dataclass(frozen=True)
class SubscriptionActivateRequest(SubscriptionRequest):
    product_id: Optional[str] = None
    user_id: Optional[str] = None
    number_of_subscriptions_in_group: int = 0
    subscription_group_id: Optional[str] = None


@dataclass(frozen=True)
class SubscriptionDeactivateRequest(SubscriptionRequest):
    reason: Optional[SubscriptionReason] = None
    period: Optional[SubscriptionPeriod] = None


@dataclass(frozen=True)
class GetUserIdResponse:
    response: GetUserIdResult
    user_id: Optional[str] = None


@dataclass(frozen=True)
class FulfillPurchaseResponse:
    response: FulfillPurchaseResult


@dataclass(frozen=True)
class RevokePurchaseResponse:
    response: RevokePurchaseResult


@dataclass(frozen=True)
class SubscriptionResponse:
    response: SubscriptionResult


REQUEST_TYPES = {
    InstantAccessOperation.GetUserId: GetUserIdRequest,
    InstantAccessOperation.Purchase: PurchaseRequest,
    InstantAccessOperation.Revoke: PurchaseRequest,
    InstantAccessOperation.SubscriptionActivate: SubscriptionActivateRequest,
    InstantAccessOperation.SubscriptionDeactivate: SubscriptionDeactivateRequest,
}
