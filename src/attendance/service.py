import logging
from typing import Any, List

import requests
from sqlalchemy.orm import Session

from src.attendance.schemas import AttendanceRequest, AttendanceResponse, WebAppPayload
from src.auth.schemas import TeacherIdentity
from src.auth.service import find_teacher_by_id
from src.config import PRESENT_MATRIX_SIZE, settings
from src.utils.exceptions import ConfigError, UpstreamError
from src.webapp.client import post_to_webapp, preview

logger = logging.getLogger(__name__)


def is_present(value: Any) -> bool:
    """true, numeric 1 and the string "1" mean present, anything else is absent"""
    if value is True or value == "1":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 1


def is_set(value: Any) -> bool:
    """
    Whether a client flag or field counts as filled in.

    Only None, False, 0, NaN and "" are empty. Empty lists and objects count as set.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and value == value
    if isinstance(value, str):
        return value != ""
    return True


def normalize_present_matrix(raw: Any) -> List[str]:
    """
    Normalize the client's presence list to exactly PRESENT_MATRIX_SIZE "0"/"1" strings.

    - A list with at least 100 entries keeps its first 100, each mapped with `is_present`.
    - Anything else (short list, missing, wrong type) becomes all "0".
      Short input is not merged or padded, the whole roll is marked absent.
    """
    if isinstance(raw, list) and len(raw) >= PRESENT_MATRIX_SIZE:
        return ["1" if is_present(v) else "0" for v in raw[:PRESENT_MATRIX_SIZE]]

    received = len(raw) if isinstance(raw, list) else None
    logger.warning(
        "presentMatrix has %s entries (expected %d), defaulting every roll to absent",
        received, PRESENT_MATRIX_SIZE,
    )
    return ["0"] * PRESENT_MATRIX_SIZE


def build_payload(secret: str, entry: AttendanceRequest) -> WebAppPayload:
    return WebAppPayload(
        secret=secret,
        subject=entry.subject if is_set(entry.subject) else "",
        date=entry.date if is_set(entry.date) else "",
        regular=1 if is_set(entry.regular) else 0,
        extra=1 if is_set(entry.extra) else 0,
        presentMatrix=normalize_present_matrix(entry.presentMatrix),
    )


def submit_attendance(db: Session, identity: TeacherIdentity, entry: AttendanceRequest) -> AttendanceResponse:
    """
    Forward one attendance submission to the caller's web app and relay its answer.

    Steps:
    1. Load the web app URL and secret stored on the caller's account.
    2. Normalize the presence list and build the payload.
    3. POST it once (no retry) and return the web app's raw body.
    """
    presence = entry.presentMatrix
    logger.info(
        "Attendance from %s: subject=%r date=%r regular=%r extra=%r presentMatrixLen=%s",
        identity.username, entry.subject, entry.date, entry.regular, entry.extra,
        len(presence) if isinstance(presence, list) else None,
    )

    teacher = find_teacher_by_id(db, identity.id)
    if teacher is None or not teacher.webapp_url or not teacher.webapp_secret:
        logger.error("Teacher %s has no web app configured", identity.username)
        raise ConfigError("teacher has no webapp configured")

    payload = build_payload(teacher.webapp_secret, entry)

    try:
        response = post_to_webapp(
            teacher.webapp_url,
            payload.model_dump(),
            timeout=settings.submit_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.error("Post to web app failed for %s: %s", identity.username, exc)
        raise UpstreamError("teacher webapp unreachable", detail=str(exc)) from exc

    body = response.text
    logger.info("Web app body for %s (first 2000 chars): %s", identity.username, preview(body))

    if not response.ok:
        # Report the web app's own diagnostics, never the stored secret
        raise UpstreamError(
            "teacher webapp error",
            detail=body,
            extra={"status": response.status_code},
        )

    return AttendanceResponse(webappResult=body or "OK")
