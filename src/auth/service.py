import logging
from datetime import timedelta
from functools import lru_cache
from typing import Optional

import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, TeacherIdentity
from src.auth.security import check_password, decode_token, hash_password, issue_token
from src.config import settings
from src.database.models import Teacher
from src.utils.exceptions import AuthError, ConflictError, ServerError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_REGISTER_FIELDS = ("username", "password", "webAppUrl", "webAppSecret")
INVALID_CREDENTIALS = "invalid credentials"

# Compared against when the username is unknown, so both login failures take the same time
@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password("not-a-real-password", rounds=rounds)


def require_jwt_secret() -> str:
    if not settings.jwt_secret:
        raise ServerError("Server misconfigured: missing JWT_SECRET")
    return settings.jwt_secret


def register(db: Session, request: RegisterRequest) -> RegisterResponse:
    """
    Create a teacher account.

    Steps:
    1. Reject the request if any required field is missing or empty.
    2. Hash the password.
    3. Insert the row, the unique index on username turns duplicates into a 409.
    """
    if not all(getattr(request, field) for field in REQUIRED_REGISTER_FIELDS):
        raise ValidationError("missing fields (username,password,webAppUrl,webAppSecret)")

    teacher = Teacher(
        username=request.username,
        password_hash=hash_password(request.password, rounds=settings.bcrypt_rounds),
        sheet_url=request.sheetUrl or None,
        webapp_url=request.webAppUrl,
        webapp_secret=request.webAppSecret,
    )

    try:
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("username taken") from exc

    logger.info("Registered teacher %s (id=%s, sheet=%s)", teacher.username, teacher.id, teacher.sheet_id)
    return RegisterResponse(id=teacher.id)


def find_teacher_by_username(db: Session, username: str) -> Optional[Teacher]:
    return db.execute(select(Teacher).where(Teacher.username == username)).scalar_one_or_none()


def find_teacher_by_id(db: Session, teacher_id: int) -> Optional[Teacher]:
    return db.execute(select(Teacher).where(Teacher.id == teacher_id)).scalar_one_or_none()


def login(db: Session, request: LoginRequest) -> LoginResponse:
    """
    Verify credentials and issue a session token.
    Unknown usernames and wrong passwords fail with the same error.
    """
    secret = require_jwt_secret()
    teacher = find_teacher_by_username(db, request.username) if request.username else None

    if teacher is None:
        check_password(request.password or "", _dummy_hash(settings.bcrypt_rounds))
        raise AuthError(INVALID_CREDENTIALS)
    if not check_password(request.password or "", teacher.password_hash):
        raise AuthError(INVALID_CREDENTIALS)

    token = issue_token(
        teacher.id,
        teacher.username,
        secret=secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(hours=settings.token_ttl_hours),
    )
    logger.info("Teacher %s logged in", teacher.username)
    return LoginResponse(token=token, webAppUrl=teacher.webapp_url)


def authenticate(token: Optional[str]) -> TeacherIdentity:
    """
    Resolve a bearer token into the caller's identity, or raise AuthError.
    """
    if not token:
        raise AuthError("No token")
    secret = require_jwt_secret()

    try:
        claims = decode_token(token, secret=secret, algorithm=settings.jwt_algorithm)
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected token: %s", exc)
        raise AuthError("Invalid token") from exc

    teacher_id = claims.get("id")
    username = claims.get("username")
    if not isinstance(teacher_id, int) or isinstance(teacher_id, bool) or not username:
        raise AuthError("Invalid token")
    return TeacherIdentity(id=teacher_id, username=username)
