"""Pydantic models for the fraud domain."""

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


class Decision(StrEnum):
    APPROVE = "approve"
    FLAG = "flag"
    DENY = "deny"


class DecisionHint(StrEnum):
    NONE = "none"
    FLAG = "flag"
    DENY = "deny"


class TransactionEvent(BaseModel):
    """A transaction submitted for a fraud check.

    The three mandatory fields are validated at the API boundary. Optional
    fields that arrive with the wrong type are dropped to ``None`` so the rules
    reading them simply do not apply. Unknown keys are kept in ``attributes``.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["transaction"] = "transaction"
    customer_id: str = Field(min_length=1)
    amount: float = Field(gt=0, strict=True)
    currency: str = Field(min_length=1)
    origin: str | None = None
    ip_address: str | None = None
    device_id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extra_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        extra = {k: v for k, v in data.items() if k not in known}
        if not extra:
            return data
        supplied = data.get("attributes") or {}
        if not isinstance(supplied, dict):
            raise ValueError("attributes must be an object")
        attributes = {**supplied, **extra}
        cleaned = {k: v for k, v in data.items() if k in known}
        cleaned["attributes"] = attributes
        return cleaned

    @field_validator("origin", "ip_address", "device_id", mode="before")
    @classmethod
    def _drop_mistyped(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class PaymentLinkEvent(BaseModel):
    kind: Literal["payment_link"] = "payment_link"
    url: str = Field(min_length=1)


class PaymentChannelEvent(BaseModel):
    kind: Literal["payment_channel"] = "payment_channel"
    channel_type: str = Field(min_length=1)
    transaction_id: str = Field(min_length=1)


class FraudDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: float = Field(default=0.0, ge=0.0)
    decision: Decision = Decision.APPROVE
    reasons: tuple[str, ...] = ()


class HistoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_id: str = ""
    amount: float
    currency: str
    timestamp: AwareDatetime


class Reputation(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_vpn: bool = False
    is_proxy: bool = False
    is_tor: bool = False
    is_blacklisted: bool = False
    risk_score: float | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_anonymizer(self) -> bool:
        return self.is_vpn or self.is_proxy or self.is_tor


class LinkParameters(BaseModel):
    reference: str
    merchant_id: int
    amount: int
    currency: str
    mode: str | None = None


class AuthoritativeTransaction(BaseModel):
    """Ground-truth transaction record served by the transaction authority."""

    id: int | None = None
    reference: str
    merchant_id: int
    customer_email: str = ""
    customer_id: int | None = None
    customer_name: str | None = None
    amount: int
    currency: str
    status: str = ""
    description: str | None = None
    created_at: datetime | None = None


class LinkValidationResult(BaseModel):
    is_suspicious: bool
    reason: str


class ChannelValidationResult(BaseModel):
    is_suspicious: bool
    reason: str
