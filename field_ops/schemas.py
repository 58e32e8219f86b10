"""
Request bodies accepted by the HTTP layer.

Every body is validated here before it reaches a service; anything that fails
is answered with 400 instead of being coerced or stored as null.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.pricing import HUNDRED, MAX_AMOUNT, MAX_QUANTITY
from .models import (
    InvoiceStatus,
    JobStatus,
    LineItem,
    Money,
    Quantity,
    PaymentMethod,
    ProductUnit,
    QuoteStatus,
    RequestStatus,
    TeamRole,
)


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


def _below(value: Optional[Decimal], name: str, limit: Decimal) -> Optional[Decimal]:
    if value is not None and value >= limit:
        raise ValueError(f"{name} must be less than {limit}")
    return value


def _positive(value: Optional[Decimal], name: str, limit: Decimal = MAX_AMOUNT) -> Optional[Decimal]:
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be greater than 0")
    return _below(value, name, limit)


def _not_negative(value: Optional[Decimal], name: str, limit: Decimal = MAX_AMOUNT) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise ValueError(f"{name} must not be negative")
    return _below(value, name, limit)


class LineItemIn(_Body):
    description: str = ""
    quantity: Quantity
    unit_price: Money

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: Decimal) -> Decimal:
        return _positive(value, "quantity", MAX_QUANTITY)

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, value: Decimal) -> Decimal:
        return _not_negative(value, "unit_price")

    def to_line_item(self) -> LineItem:
        return LineItem(description=self.description, quantity=self.quantity, unit_price=self.unit_price)


def to_line_items(items: Optional[List[LineItemIn]]) -> List[LineItem]:
    return [item.to_line_item() for item in items or []]


# Customers

class CustomerIn(_Body):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    notes: Optional[str] = None


class CustomerUpdate(_Body):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    notes: Optional[str] = None


# Team and catalog

class TeamMemberIn(_Body):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: TeamRole = TeamRole.TECHNICIAN
    hourly_rate: Optional[Money] = None
    color: str = "#3b82f6"
    active: bool = True

    @field_validator("hourly_rate")
    @classmethod
    def validate_hourly_rate(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return _not_negative(value, "hourly_rate")


class TeamMemberUpdate(_Body):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[TeamRole] = None
    hourly_rate: Optional[Money] = None
    color: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("hourly_rate")
    @classmethod
    def validate_hourly_rate(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return _not_negative(value, "hourly_rate")


class ProductIn(_Body):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Money
    unit: ProductUnit = ProductUnit.EACH
    category: Optional[str] = None
    is_taxable: bool = True

    @field_validator("price")
    @classmethod
    def validate_price(cls, value: Decimal) -> Decimal:
        return _not_negative(value, "price")


class ProductUpdate(_Body):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Money] = None
    unit: Optional[ProductUnit] = None
    category: Optional[str] = None
    is_taxable: Optional[bool] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return _not_negative(value, "price")


# Service requests

class ServiceRequestIn(_Body):
    customer_id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    preferred_date: Optional[dt.date] = None


class PortalRequestIn(_Body):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    preferred_date: Optional[dt.date] = None


class ServiceRequestUpdate(_Body):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    preferred_date: Optional[dt.date] = None
    status: Optional[RequestStatus] = None


# Jobs

class JobIn(_Body):
    customer_id: int
    quote_id: Optional[int] = None
    request_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: JobStatus = JobStatus.SCHEDULED
    scheduled_date: Optional[dt.date] = None
    scheduled_time: Optional[str] = None
    assigned_to_id: Optional[int] = None
    line_items: Optional[List[LineItemIn]] = None


class JobUpdate(_Body):
    customer_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[JobStatus] = None
    scheduled_date: Optional[dt.date] = None
    scheduled_time: Optional[str] = None
    assigned_to_id: Optional[int] = None
    line_items: Optional[List[LineItemIn]] = None


# Quotes

class QuoteIn(_Body):
    customer_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    valid_until: Optional[dt.date] = None
    items: List[LineItemIn] = Field(default_factory=list)


class QuoteUpdate(_Body):
    customer_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    valid_until: Optional[dt.date] = None
    status: Optional[QuoteStatus] = None
    items: Optional[List[LineItemIn]] = None


class ConvertQuoteIn(_Body):
    scheduled_date: Optional[dt.date] = None
    scheduled_time: Optional[str] = None
    assigned_to_id: Optional[int] = None


# Invoices and payments

class InvoiceIn(_Body):
    customer_id: int
    job_id: Optional[int] = None
    items: Optional[List[LineItemIn]] = None
    notes: Optional[str] = None
    due_date: Optional[dt.date] = None


class InvoiceUpdate(_Body):
    job_id: Optional[int] = None
    items: Optional[List[LineItemIn]] = None
    notes: Optional[str] = None
    due_date: Optional[dt.date] = None
    status: Optional[InvoiceStatus] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[InvoiceStatus]) -> Optional[InvoiceStatus]:
        if value is None:
            return value
        if value not in (InvoiceStatus.DRAFT, InvoiceStatus.SENT):
            raise ValueError("partial and paid are set by recording payments")
        return value


class PaymentIn(_Body):
    invoice_id: int
    amount: Money
    method: PaymentMethod = PaymentMethod.CASH
    reference: Optional[str] = None
    date: Optional[dt.date] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal) -> Decimal:
        return _positive(value, "amount")


# Settings

class SettingsUpdate(_Body):
    company_name: Optional[str] = None
    company_phone: Optional[str] = None
    company_email: Optional[str] = None
    company_address: Optional[str] = None
    tax_rate: Optional[str] = None
    invoice_prefix: Optional[str] = None
    quote_prefix: Optional[str] = None

    @field_validator("tax_rate", mode="before")
    @classmethod
    def validate_tax_rate(cls, value: object) -> Optional[str]:
        if value is None:
            return value
        text = str(value).strip()
        try:
            rate = Decimal(text)
        except InvalidOperation:
            raise ValueError("tax_rate must be a number")
        if not rate.is_finite():
            raise ValueError("tax_rate must be a number")
        if rate < 0 or rate > HUNDRED:
            raise ValueError("tax_rate must be between 0 and 100")
        return text
