from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.auth.schemas import TeacherIdentity
from src.auth.service import authenticate

# auto_error is off so a missing header becomes our 401 instead of FastAPI's 403
security = HTTPBearer(auto_error=False)

def get_current_teacher(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TeacherIdentity:
    """
    Verify the session token from the Authorization header.
    Expects:
        Authorization: Bearer <token>
    """
    token = credentials.credentials if credentials else None
    return authenticate(token)
