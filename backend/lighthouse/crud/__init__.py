"""CRUD singletons.

Domain repositories delegate here; nothing above the repository layer
builds SQL directly.
"""

from .crud_api_key import api_key
from .crud_check import check
from .crud_monthly_usage import monthly_usage

__all__ = ["api_key", "check", "monthly_usage"]
