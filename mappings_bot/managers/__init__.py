"""
Manager modules for the mappings bot.
"""

from .lookup_manager import LookupManager, LookupRequest, LookupResult, LookupStatus

__all__ = ["LookupManager", "LookupRequest", "LookupResult", "LookupStatus"]
