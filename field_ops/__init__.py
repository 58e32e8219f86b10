"""
Field Ops Package

Backend for a small field-service business:
- Customers, team members and the product/service catalog
- Service requests and job scheduling
- Quotes, invoices and the payment ledger
- Dashboard and revenue reporting
"""

__version__ = "1.0.0"
__author__ = "Field Ops Team"
