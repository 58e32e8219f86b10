from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...models import ServiceRequest
from ...schemas import PortalRequestIn
from ...services import portal as portal_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["portal"])


@router.get("/portal/{token}")
def portal_view(token: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return portal_service.portal_view(store, token)


@router.post("/portal/{token}/requests", response_model=ServiceRequest)
def submit_request(token: str, body: PortalRequestIn, store: DocumentStore = Depends(get_store)):
    return portal_service.submit_portal_request(store, token, body)
