from fastapi import APIRouter, Depends, status

from src.auth.schemas import TeacherIdentity
from src.utils.authorization import get_current_teacher
from src.utils.exceptions import handle_exceptions
from src.webapp.verify.schemas import VerifyWebAppRequest, VerifyWebAppResponse
from src.webapp.verify.service import verify_webapp

router = APIRouter()

@router.post("", status_code=status.HTTP_200_OK, response_model=VerifyWebAppResponse)
def verify_teacher_webapp(
    request: VerifyWebAppRequest,
    identity: TeacherIdentity = Depends(get_current_teacher),
):
    """
    Test call to a teacher web app URL.
    Authentication is enforced using the Authorization header:
        Authorization: Bearer <token>
    """
    try:
        return verify_webapp(identity, request)
    except Exception as e:
        handle_exceptions(None, e)
