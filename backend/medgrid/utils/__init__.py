"""
Shared utilities.
"""
from medgrid.utils.logger import configure_logging
from medgrid.utils.validators import is_blank, missing_fields, is_valid_phone

__all__ = [
    "configure_logging",
    "is_blank",
    "missing_fields",
    "is_valid_phone",
]
