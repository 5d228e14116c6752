from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional
from sqlmodel import Field
from framework.repository.entity import AuditedEntity


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    CASH = "cash"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class Feature(AuditedEntity, table=True):
    __tablename__ = "features"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    text: str = Field(max_length=500)
    arabic_text: Optional[str] = Field(default=None, max_length=500)


class SubscriptionPlan(AuditedEntity, table=True):
    __tablename__ = "subscription_plans"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    type: str = Field(max_length=100, description="Plan name, e.g. Basic")
    pricing: int = Field(default=0, ge=0)


class SubscriptionPlanFeature(AuditedEntity, table=True):
    __tablename__ = "subscription_plan_features"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    subscription_plan_id: str = Field(foreign_key="subscription_plans.id", index=True, max_length=36)
    feature_id: str = Field(foreign_key="features.id", index=True, max_length=36)


class Subscription(AuditedEntity, table=True):
    __tablename__ = "subscriptions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    facility_id: str = Field(foreign_key="facilities.user_id", index=True, max_length=36)
    plan_id: str = Field(foreign_key="subscription_plans.id", index=True, max_length=36)
    start: datetime
    expiry: datetime
    status: SubscriptionStatus = Field(default=SubscriptionStatus.PENDING)
    amount: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)


class Payment(AuditedEntity, table=True):
    __tablename__ = "payments"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    facility_id: str = Field(foreign_key="facilities.user_id", index=True, max_length=36)
    subscription_id: str = Field(foreign_key="subscriptions.id", index=True, max_length=36)
    amount: Decimal = Field(max_digits=18, decimal_places=2)
    method: PaymentMethod
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    paid_at: Optional[datetime] = Field(default=None)
    currency: str = Field(default="SAR", max_length=3)
