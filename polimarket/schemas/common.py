"""
Response Envelope
"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime, timezone


class ApiResponse(BaseModel):
    success: bool
    message: str = ""
    data: Any = None
    errors: List[str] = []
    error_kind: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
