"""
Domain models for the field ops document store
"""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, PlainSerializer, model_validator
from typing_extensions import Annotated

from .core.pricing import ZERO, line_total, to_cents


def _coerce_decimal(value: Any) -> Any:
    # floats come back from the JSON document; go through str to avoid binary noise
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(_coerce_decimal),
    AfterValidator(to_cents),
    PlainSerializer(float, return_type=float, when_used="json"),
]

Quantity = Annotated[
    Decimal,
    BeforeValidator(_coerce_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def _number_as_text(value: Any) -> Any:
    # older documents stored the tax rate as a JSON number
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


RateText = Annotated[str, BeforeValidator(_number_as_text)]


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PARTIAL = "partial"
    PAID = "paid"


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestStatus(str, Enum):
    NEW = "new"
    SCHEDULED = "scheduled"
    CLOSED = "closed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHECK = "check"
    CARD = "card"
    ACH = "ach"
    OTHER = "other"


class TeamRole(str, Enum):
    TECHNICIAN = "technician"
    ADMIN = "admin"
    OWNER = "owner"


class ProductUnit(str, Enum):
    EACH = "each"
    HOUR = "hour"
    FOOT = "foot"
    GALLON = "gallon"


class LineItem(BaseModel):
    description: str = ""
    quantity: Quantity
    unit_price: Money
    line_total: Money = ZERO

    @model_validator(mode="after")
    def compute_line_total(self) -> "LineItem":
        self.line_total = line_total(self)
        return self


class Customer(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    notes: Optional[str] = None
    portal_token: str
    created_at: datetime
    updated_at: datetime


class TeamMember(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: TeamRole = TeamRole.TECHNICIAN
    hourly_rate: Optional[Money] = None
    color: str = "#3b82f6"
    active: bool = True
    created_at: datetime


class Product(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Money
    unit: ProductUnit = ProductUnit.EACH
    category: Optional[str] = None
    is_taxable: bool = True
    created_at: datetime


class ServiceRequest(BaseModel):
    id: int
    customer_id: int
    title: str
    description: Optional[str] = None
    preferred_date: Optional[date] = None
    status: RequestStatus = RequestStatus.NEW
    job_id: Optional[int] = None
    created_at: datetime


class Job(BaseModel):
    id: int
    customer_id: int
    quote_id: Optional[int] = None
    request_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: JobStatus = JobStatus.SCHEDULED
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    assigned_to_id: Optional[int] = None
    line_items: List[LineItem] = Field(default_factory=list)
    estimated_total: Optional[Money] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Quote(BaseModel):
    id: int
    quote_number: str
    customer_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Money = ZERO
    tax: Money = ZERO
    total: Money = ZERO
    status: QuoteStatus = QuoteStatus.DRAFT
    valid_until: Optional[date] = None
    converted_job_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class Invoice(BaseModel):
    id: int
    invoice_number: str
    customer_id: int
    job_id: Optional[int] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Money = ZERO
    tax: Money = ZERO
    total: Money = ZERO
    amount_paid: Money = ZERO
    balance_due: Money = ZERO
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: Optional[str] = None
    due_date: date
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Payment(BaseModel):
    id: int
    invoice_id: int
    customer_id: int
    amount: Money
    method: PaymentMethod = PaymentMethod.CASH
    reference: Optional[str] = None
    date: dt.date
    created_at: datetime


class Settings(BaseModel):
    company_name: str = ""
    company_phone: str = ""
    company_email: str = ""
    company_address: str = ""
    tax_rate: RateText = "0"
    invoice_prefix: str = "INV-"
    quote_prefix: str = "Q-"
