"""
Service layer: every operation takes the DocumentStore it works on.

This module contains service implementations for:
- Document storage and identifier allocation
- Customers, team, catalog and service requests
- Jobs, quotes, invoices and the payment ledger
- Settings, reports and the customer portal
"""

from . import catalog
from . import customers
from . import document_store
from . import invoices
from . import jobs
from . import payments
from . import portal
from . import quotes
from . import reports
from . import service_requests
from . import settings

__all__ = [
    'catalog',
    'customers',
    'document_store',
    'invoices',
    'jobs',
    'payments',
    'portal',
    'quotes',
    'reports',
    'service_requests',
    'settings'
]
