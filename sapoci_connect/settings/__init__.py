"""Environment-backed settings."""

from sapoci_connect.settings.app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
