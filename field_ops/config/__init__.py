"""
Runtime configuration.

Settings are read from the environment (``FIELD_OPS_`` prefix) and an
optional ``.env`` file.
"""

from .settings import AppSettings, default_settings_record, get_app_settings

__all__ = [
    'AppSettings',
    'default_settings_record',
    'get_app_settings',
]
