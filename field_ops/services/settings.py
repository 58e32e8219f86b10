"""
Settings record: company details, tax rate and document number prefixes.

Changing the tax rate or a prefix only affects documents created or
re-priced afterwards; stored totals are never recomputed.
"""

import logging
from decimal import Decimal

from ..core.pricing import parse_tax_rate
from ..models import Settings
from ..schemas import SettingsUpdate
from .document_store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_INVOICE_PREFIX = "INV-"
DEFAULT_QUOTE_PREFIX = "Q-"


def get_settings(store: DocumentStore) -> Settings:
    return Settings.model_validate(store.settings)


def update_settings(store: DocumentStore, payload: SettingsUpdate) -> Settings:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    store.update_settings(changes)
    logger.info("Settings updated", extra={"evt": "settings_updated", "fields": sorted(changes)})
    return get_settings(store)


def current_tax_rate(store: DocumentStore) -> Decimal:
    """Tax rate in effect right now; unparseable values count as 0"""
    return parse_tax_rate(store.settings.get("tax_rate"))


def invoice_prefix(store: DocumentStore) -> str:
    return store.settings.get("invoice_prefix") or DEFAULT_INVOICE_PREFIX


def quote_prefix(store: DocumentStore) -> str:
    return store.settings.get("quote_prefix") or DEFAULT_QUOTE_PREFIX
