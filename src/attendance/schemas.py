from typing import Any, List
from pydantic import BaseModel, Field

class AttendanceRequest(BaseModel):
    # Forwarded as sent, or "" when empty
    subject: Any = None
    date: Any = None
    # Truthy/falsy as sent by the client, forwarded as 0/1
    regular: Any = None
    extra: Any = None
    # Expected: 100 entries of true/1/"1" (present) or anything else (absent)
    presentMatrix: Any = None

class WebAppPayload(BaseModel):
    """Body posted to the teacher's web app"""
    secret: str
    subject: Any = ""
    date: Any = ""
    regular: int = Field(ge=0, le=1)
    extra: int = Field(ge=0, le=1)
    presentMatrix: List[str]

class AttendanceResponse(BaseModel):
    ok: bool = True
    webappResult: str
