import logging

import requests
from fastapi import status

from src.auth.schemas import TeacherIdentity
from src.config import settings
from src.utils.exceptions import UpstreamError, ValidationError
from src.webapp.client import parse_body, post_to_webapp
from src.webapp.verify.schemas import VerifyWebAppRequest, VerifyWebAppResponse

logger = logging.getLogger(__name__)


def verify_webapp(identity: TeacherIdentity, request: VerifyWebAppRequest) -> VerifyWebAppResponse:
    """
    Send a test payload to a web app before (or after) saving it on an account.

    The web app receives {"secret": ..., "test": true} and should answer 2xx if the secret matches.
    A non-2xx answer is reported as a 400 carrying the web app's body.
    """
    if not request.webAppUrl or not request.webAppSecret:
        raise ValidationError("missing fields")

    logger.info("Teacher %s verifying web app", identity.username)
    try:
        response = post_to_webapp(
            request.webAppUrl,
            {"secret": request.webAppSecret, "test": True},
            timeout=settings.verify_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.warning("Web app verification failed for %s: %s", identity.username, exc)
        raise UpstreamError("verify failed", detail=str(exc)) from exc

    data = parse_body(response)
    if not response.ok:
        raise UpstreamError(
            "webapp verification failed",
            status_code=status.HTTP_400_BAD_REQUEST,
            extra={"ok": False, "data": data},
        )
    return VerifyWebAppResponse(ok=True, data=data)
