"""
Job scheduling.

A job references its customer and, optionally, the quote or service request
it came from. ``completed_at`` is stamped once, on the first transition to
completed, and is never overwritten.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..core.clock import utc_now
from ..exceptions import InvalidInputError
from ..models import Job, JobStatus, LineItem
from ..schemas import JobIn, JobUpdate, to_line_items
from . import service_requests
from .catalog import ensure_team_member
from .customers import ensure_customer
from .document_store import DocumentStore

logger = logging.getLogger(__name__)


def _joined(store: DocumentStore, job: Job) -> Dict[str, Any]:
    """Job with the customer and assignee display fields the UI shows"""
    customer = store.customers.get(job.customer_id) or {}
    member = store.team.get(job.assigned_to_id) if job.assigned_to_id is not None else None
    return {
        **job.model_dump(mode="json"),
        "customer_name": customer.get("name"),
        "customer_address": customer.get("address"),
        "customer_phone": customer.get("phone"),
        "customer_email": customer.get("email"),
        "assigned_to_name": member.get("name") if member else None,
    }


def _schedule_key(job: Job):
    return (job.scheduled_date or date.max, job.scheduled_time or "", job.id)


def list_jobs(store: DocumentStore, status: Optional[JobStatus] = None, on_date: Optional[date] = None,
              customer_id: Optional[int] = None) -> List[Dict[str, Any]]:
    jobs = [Job.model_validate(r) for r in store.jobs.all()]
    if status is not None:
        jobs = [j for j in jobs if j.status == status]
    if on_date is not None:
        jobs = [j for j in jobs if j.scheduled_date == on_date]
    if customer_id is not None:
        jobs = [j for j in jobs if j.customer_id == customer_id]
    jobs.sort(key=_schedule_key)
    return [_joined(store, j) for j in jobs]


def get_job(store: DocumentStore, job_id: int) -> Job:
    return Job.model_validate(store.jobs.require(job_id))


def job_detail(store: DocumentStore, job_id: int) -> Dict[str, Any]:
    return _joined(store, get_job(store, job_id))


def insert_job(store: DocumentStore, *, customer_id: int, title: Optional[str] = None,
               description: Optional[str] = None, status: JobStatus = JobStatus.SCHEDULED,
               scheduled_date: Optional[date] = None, scheduled_time: Optional[str] = None,
               assigned_to_id: Optional[int] = None, line_items: Optional[List[LineItem]] = None,
               estimated_total: Optional[Decimal] = None, quote_id: Optional[int] = None,
               request_id: Optional[int] = None) -> Job:
    """Validate references and write a new job; shared by create and quote conversion"""
    with store.transaction():
        ensure_customer(store, customer_id)
        if assigned_to_id is not None:
            ensure_team_member(store, assigned_to_id)
        if request_id is not None and store.requests.get(request_id) is None:
            raise InvalidInputError(f"service request {request_id} does not exist",
                                    details={"request_id": request_id})
        now = utc_now()
        job = Job(
            id=store.next_id("jobs"),
            customer_id=customer_id,
            quote_id=quote_id,
            request_id=request_id,
            title=title,
            description=description,
            status=status,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            assigned_to_id=assigned_to_id,
            line_items=line_items or [],
            estimated_total=estimated_total,
            completed_at=now if status == JobStatus.COMPLETED else None,
            created_at=now,
            updated_at=now,
        )
        store.jobs.insert(job.model_dump(mode="json"))
        if request_id is not None:
            service_requests.link_job(store, request_id, job.id)
    logger.info("Job scheduled", extra={
        "evt": "job_created", "job_id": job.id, "customer_id": customer_id,
        "quote_id": quote_id, "scheduled_date": str(scheduled_date) if scheduled_date else None,
    })
    return job


def create_job(store: DocumentStore, payload: JobIn) -> Job:
    return insert_job(
        store,
        customer_id=payload.customer_id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
        scheduled_date=payload.scheduled_date,
        scheduled_time=payload.scheduled_time,
        assigned_to_id=payload.assigned_to_id,
        line_items=to_line_items(payload.line_items),
        quote_id=payload.quote_id,
        request_id=payload.request_id,
    )


def update_job(store: DocumentStore, job_id: int, payload: JobUpdate) -> Job:
    with store.transaction():
        job = get_job(store, job_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"line_items"})
        for field in ("customer_id", "status"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "customer_id" in changes:
            ensure_customer(store, changes["customer_id"])
        if changes.get("assigned_to_id") is not None:
            ensure_team_member(store, changes["assigned_to_id"])
        if "line_items" in payload.model_fields_set:
            changes["line_items"] = to_line_items(payload.line_items)

        now = utc_now()
        if changes.get("status") == JobStatus.COMPLETED and job.completed_at is None:
            changes["completed_at"] = now
            logger.info("Job completed", extra={"evt": "job_completed", "job_id": job_id})
        changes["updated_at"] = now

        job = job.model_copy(update=changes)
        store.jobs.replace(job.model_dump(mode="json"))
    return job


def delete_job(store: DocumentStore, job_id: int) -> None:
    store.jobs.delete(job_id)
    logger.info("Job deleted", extra={"evt": "job_deleted", "job_id": job_id})

