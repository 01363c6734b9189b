"""Utility exports."""
from .validation import ensure_host_name

__all__ = ["ensure_host_name"]
