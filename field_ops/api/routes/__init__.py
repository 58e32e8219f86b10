"""API routers, one per resource; all are mounted under /api."""
