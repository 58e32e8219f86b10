"""
Quote lifecycle.

States: draft -> sent -> accepted / declined / expired. A quote is converted
into a job at most once; ``converted_job_id`` records the job and a second
conversion is rejected.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.clock import utc_now
from ..core.numbering import format_document_number
from ..core.pricing import calculate_totals
from ..exceptions import ConflictError
from ..models import Quote, QuoteStatus
from ..schemas import ConvertQuoteIn, QuoteIn, QuoteUpdate, to_line_items
from . import jobs
from .customers import ensure_customer
from .document_store import QUOTE_NUMBER_SEQUENCE, DocumentStore
from .settings import current_tax_rate, quote_prefix

logger = logging.getLogger(__name__)


def _with_customer(store: DocumentStore, quote: Quote) -> Dict[str, Any]:
    customer = store.customers.get(quote.customer_id) or {}
    return {**quote.model_dump(mode="json"), "customer_name": customer.get("name")}


def list_quotes(store: DocumentStore, status: Optional[QuoteStatus] = None,
                customer_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Quotes newest first, optionally filtered by status and customer"""
    quotes = [Quote.model_validate(r) for r in store.quotes.all()]
    if status is not None:
        quotes = [q for q in quotes if q.status == status]
    if customer_id is not None:
        quotes = [q for q in quotes if q.customer_id == customer_id]
    quotes.sort(key=lambda q: (q.created_at, q.id), reverse=True)
    return [_with_customer(store, q) for q in quotes]


def get_quote(store: DocumentStore, quote_id: int) -> Quote:
    return Quote.model_validate(store.quotes.require(quote_id))


def quote_detail(store: DocumentStore, quote_id: int) -> Dict[str, Any]:
    return _with_customer(store, get_quote(store, quote_id))


def create_quote(store: DocumentStore, payload: QuoteIn) -> Quote:
    """Create a draft quote priced at the current tax rate.

    The number is ``{quote_prefix}{sequence:04d}`` where the sequence comes
    from its own monotonic counter, so numbers are never reused.
    """
    with store.transaction():
        ensure_customer(store, payload.customer_id)
        items = to_line_items(payload.items)
        totals = calculate_totals(items, current_tax_rate(store))
        sequence = store.next_sequence(QUOTE_NUMBER_SEQUENCE)
        now = utc_now()
        quote = Quote(
            id=store.next_id("quotes"),
            quote_number=format_document_number(quote_prefix(store), sequence),
            customer_id=payload.customer_id,
            title=payload.title,
            description=payload.description,
            valid_until=payload.valid_until,
            items=items,
            status=QuoteStatus.DRAFT,
            created_at=now,
            updated_at=now,
            **totals.as_dict(),
        )
        store.quotes.insert(quote.model_dump(mode="json"))
    logger.info(f"Quote {quote.quote_number} created", extra={
        "evt": "quote_created", "quote_id": quote.id, "customer_id": quote.customer_id, "total": quote.total,
    })
    return quote


def update_quote(store: DocumentStore, quote_id: int, payload: QuoteUpdate) -> Quote:
    """Replace the supplied fields; re-price when items are supplied.

    Any status in the quote status set is accepted without transition checks.
    """
    with store.transaction():
        quote = get_quote(store, quote_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"items"})
        for field in ("customer_id", "status"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "customer_id" in changes:
            ensure_customer(store, changes["customer_id"])
        if payload.items is not None:
            items = to_line_items(payload.items)
            changes["items"] = items
            changes.update(calculate_totals(items, current_tax_rate(store)).as_dict())
        changes["updated_at"] = utc_now()

        quote = quote.model_copy(update=changes)
        store.quotes.replace(quote.model_dump(mode="json"))
    logger.info(f"Quote {quote.quote_number} updated", extra={
        "evt": "quote_updated", "quote_id": quote.id, "status": quote.status.value,
    })
    return quote


def convert_quote(store: DocumentStore, quote_id: int, payload: Optional[ConvertQuoteIn] = None) -> Dict[str, int]:
    """Turn a quote into a scheduled job.

    The job copies the customer, title, description and a snapshot of the
    items, with ``estimated_total`` set to the quote total. The quote becomes
    accepted and remembers the job id.

    Raises:
        NotFoundError: the quote does not exist
        ConflictError: the quote was already converted
    """
    payload = payload or ConvertQuoteIn()
    with store.transaction():
        quote = get_quote(store, quote_id)
        if quote.converted_job_id is not None:
            logger.warning(f"Quote {quote.quote_number} already converted", extra={
                "evt": "quote_convert_rejected", "quote_id": quote_id, "job_id": quote.converted_job_id,
            })
            raise ConflictError(
                f"quote {quote.quote_number} was already converted to job {quote.converted_job_id}",
                details={"quote_id": quote_id, "job_id": quote.converted_job_id},
            )

        job = jobs.insert_job(
            store,
            customer_id=quote.customer_id,
            title=quote.title,
            description=quote.description,
            scheduled_date=payload.scheduled_date,
            scheduled_time=payload.scheduled_time,
            assigned_to_id=payload.assigned_to_id,
            line_items=[item.model_copy() for item in quote.items],
            estimated_total=quote.total,
            quote_id=quote.id,
        )
        quote = quote.model_copy(update={
            "status": QuoteStatus.ACCEPTED,
            "converted_job_id": job.id,
            "updated_at": utc_now(),
        })
        store.quotes.replace(quote.model_dump(mode="json"))
    logger.info(f"Quote {quote.quote_number} converted to job {job.id}", extra={
        "evt": "quote_converted", "quote_id": quote.id, "job_id": job.id,
    })
    return {"job_id": job.id}
