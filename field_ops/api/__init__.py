"""
HTTP/JSON API served with FastAPI.

Use ``create_app`` (a factory, so uvicorn runs it with ``--factory``).
"""

from .app import create_app

__all__ = ['create_app']
