"""
Read-only derived views: dashboard stats, revenue by month, job counts
"""

from collections import Counter, OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..core.clock import today as current_date
from ..core.pricing import ZERO
from ..models import Customer, Invoice, InvoiceStatus, Job, JobStatus, Payment
from .document_store import DocumentStore

OPEN_INVOICE_STATUSES = (InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.PARTIAL)


def _month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def _shift_month(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def dashboard(store: DocumentStore, today: Optional[date] = None) -> Dict[str, Any]:
    """Today's jobs plus headline stats for the landing page"""
    today = today or current_date()
    week_end = today + timedelta(days=7)
    month_start = today.replace(day=1)

    jobs = [Job.model_validate(r) for r in store.jobs.all()]
    invoices = [Invoice.model_validate(r) for r in store.invoices.all()]
    payments = [Payment.model_validate(r) for r in store.payments.all()]
    customers = {r["id"]: Customer.model_validate(r) for r in store.customers.all()}

    todays_jobs = sorted(
        (j for j in jobs if j.scheduled_date == today),
        key=lambda j: (j.scheduled_time or "", j.id),
    )
    open_invoices = [i for i in invoices if i.status in OPEN_INVOICE_STATUSES]

    stats = {
        "total_customers": len(customers),
        "jobs_today": len(todays_jobs),
        "jobs_this_week": sum(
            1 for j in jobs if j.scheduled_date is not None and today <= j.scheduled_date <= week_end
        ),
        "pending_invoices": len(open_invoices),
        "outstanding_balance": float(sum((i.balance_due for i in open_invoices), ZERO)),
        "revenue_this_month": float(sum(
            (p.amount for p in payments if month_start <= p.date <= today), ZERO
        )),
    }

    todays = []
    for job in todays_jobs:
        customer = customers.get(job.customer_id)
        todays.append({
            **job.model_dump(mode="json"),
            "customer_name": customer.name if customer else None,
            "customer_address": customer.address if customer else None,
        })
    return {"todaysJobs": todays, "stats": stats}


def revenue_by_month(store: DocumentStore, months: int = 6, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Payments received per calendar month for the last ``months`` months, oldest first.

    Returns: [{"month": "2026-02", "revenue": 1234.5, "count": 3}, ...]
    """
    today = today or current_date()
    start = _shift_month(today.replace(day=1), -(max(months, 1) - 1))

    buckets: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    cursor = start
    while cursor <= today:
        buckets[_month_key(cursor)] = {"revenue": Decimal(0), "count": 0}
        cursor = _shift_month(cursor, 1)

    for record in store.payments.all():
        payment = Payment.model_validate(record)
        key = _month_key(payment.date)
        if key in buckets and payment.date <= today:
            buckets[key]["revenue"] += payment.amount
            buckets[key]["count"] += 1

    return [
        {"month": key, "revenue": float(bucket["revenue"]), "count": bucket["count"]}
        for key, bucket in buckets.items()
    ]


def job_counts(store: DocumentStore) -> Dict[str, int]:
    counts = Counter(Job.model_validate(r).status for r in store.jobs.all())
    return {status.value: counts.get(status, 0) for status in JobStatus}
