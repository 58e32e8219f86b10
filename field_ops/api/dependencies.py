from fastapi import Request

from ..config.settings import AppSettings
from ..services.document_store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings
