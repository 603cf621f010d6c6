"""
Configuration for the load distribution policy builder.
"""
from .settings import Settings, get_settings, reset_settings
from .constants import (
    LDP_API_GROUP,
    LDP_API_VERSION,
    LDP_KIND,
    LDP_PLURAL,
)

__all__ = [
    'Settings',
    'get_settings',
    'reset_settings',
    'LDP_API_GROUP',
    'LDP_API_VERSION',
    'LDP_KIND',
    'LDP_PLURAL',
]
