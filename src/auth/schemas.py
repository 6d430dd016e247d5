from typing import Optional
from pydantic import BaseModel, ConfigDict

# Field names follow the JSON the web client sends (camelCase)
# Everything is optional here, missing values are reported by the service as a 400

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    sheetUrl: Optional[str] = None
    webAppUrl: Optional[str] = None
    webAppSecret: Optional[str] = None

class RegisterResponse(BaseModel):
    ok: bool = True
    id: int

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class LoginResponse(BaseModel):
    token: str
    webAppUrl: str

class TeacherIdentity(BaseModel):
    """Who the bearer token says the caller is"""
    model_config = ConfigDict(frozen=True)

    id: int
    username: str
