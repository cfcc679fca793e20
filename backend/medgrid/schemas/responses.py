"""
Common response schemas.
"""
from pydantic import BaseModel
from typing import Optional


class MessageResponse(BaseModel):
    """Generic response with a message."""
    success: bool
    message: str
    data: Optional[dict] = None


class ErrorResponse(BaseModel):
    """Error payload returned by every exception handler."""
    success: bool = False
    error: str
    message: str
