from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from src.auth.service import login, register
from src.database.core import make_session
from src.utils.exceptions import handle_exceptions

router = APIRouter()

@router.post("/register", status_code=status.HTTP_200_OK, response_model=RegisterResponse)
def register_teacher(
    request: RegisterRequest,
    db: Session = Depends(make_session),
):
    """
    Create a teacher account with its web app configuration.
    """
    try:
        return register(db, request)
    except Exception as e:
        handle_exceptions(db, e)

@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
def login_teacher(
    request: LoginRequest,
    db: Session = Depends(make_session),
):
    """
    Exchange username and password for a bearer token valid for 8 hours.
    """
    try:
        return login(db, request)
    except Exception as e:
        handle_exceptions(db, e)
