from fastapi import APIRouter, Depends

from ...models import Settings
from ...schemas import SettingsUpdate
from ...services import settings as settings_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=Settings)
def get_settings(store: DocumentStore = Depends(get_store)):
    return settings_service.get_settings(store)


@router.put("/settings", response_model=Settings)
def update_settings(body: SettingsUpdate, store: DocumentStore = Depends(get_store)):
    return settings_service.update_settings(store, body)
