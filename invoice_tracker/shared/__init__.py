from .result import Result, Return, Error
from .urls import is_absolute_http_url
from .validation import validation_details

__all__ = ["Result", "Return", "Error", "is_absolute_http_url", "validation_details"]
