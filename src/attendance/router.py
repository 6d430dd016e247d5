from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.attendance.schemas import AttendanceRequest, AttendanceResponse
from src.attendance.service import submit_attendance
from src.auth.schemas import TeacherIdentity
from src.database.core import make_session
from src.utils.authorization import get_current_teacher
from src.utils.exceptions import handle_exceptions

router = APIRouter()

@router.post("", status_code=status.HTTP_200_OK, response_model=AttendanceResponse)
def process_attendance_submission(
    entry: AttendanceRequest,
    identity: TeacherIdentity = Depends(get_current_teacher),
    db: Session = Depends(make_session),
):
    """
    Relay one attendance submission to the caller's web app.
    Authentication is enforced using the Authorization header:
        Authorization: Bearer <token>
    """
    try:
        return submit_attendance(db, identity, entry)
    except Exception as e:
        handle_exceptions(db, e)
