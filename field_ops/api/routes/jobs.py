import datetime as dt
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ...models import Job, JobStatus
from ...schemas import JobIn, JobUpdate
from ...services import jobs as job_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["jobs"])


@router.get("/jobs")
def list_jobs(
    status: Optional[JobStatus] = None,
    on_date: Optional[dt.date] = Query(default=None, alias="date"),
    customer_id: Optional[int] = None,
    store: DocumentStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    return job_service.list_jobs(store, status, on_date, customer_id)


@router.get("/jobs/{job_id}")
def get_job(job_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return job_service.job_detail(store, job_id)


@router.post("/jobs", response_model=Job)
def create_job(body: JobIn, store: DocumentStore = Depends(get_store)):
    return job_service.create_job(store, body)


@router.put("/jobs/{job_id}", response_model=Job)
def update_job(job_id: int, body: JobUpdate, store: DocumentStore = Depends(get_store)):
    return job_service.update_job(store, job_id, body)


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, bool]:
    job_service.delete_job(store, job_id)
    return {"success": True}
