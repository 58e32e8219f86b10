from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from ...services import reports as report_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["reports"])


@router.get("/dashboard")
def dashboard(store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return report_service.dashboard(store)


@router.get("/reports/revenue")
def revenue(months: int = Query(default=6, ge=1, le=36),
            store: DocumentStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return report_service.revenue_by_month(store, months)


@router.get("/reports/jobs")
def job_counts(store: DocumentStore = Depends(get_store)) -> Dict[str, int]:
    return report_service.job_counts(store)
