# Settings modules
from .app_settings import AppSettings, get_app_settings

__all__ = [
    "AppSettings",
    "get_app_settings",
]
