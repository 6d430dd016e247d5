from typing import Any, Optional
from pydantic import BaseModel

class VerifyWebAppRequest(BaseModel):
    webAppUrl: Optional[str] = None
    webAppSecret: Optional[str] = None

class VerifyWebAppResponse(BaseModel):
    ok: bool
    data: Any = None
