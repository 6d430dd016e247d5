import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "attendance-relay/1.0"
BODY_PREVIEW_CHARS = 2000


def post_to_webapp(url: str, payload: Dict[str, Any], timeout: float) -> requests.Response:
    """
    POST a JSON payload to a teacher's web app.

    Raises requests.RequestException (Timeout, ConnectionError, ...) when the call itself fails,
    the caller decides what a non-2xx status means.
    """
    response = requests.post(
        url,
        json=payload,
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
    )
    logger.info("Web app responded with status %s", response.status_code)
    logger.debug("Web app response body: %s", preview(response.text))
    return response


def parse_body(response: requests.Response) -> Any:
    """JSON body when there is one, raw text otherwise"""
    try:
        return response.json()
    except ValueError:
        return response.text


def preview(text: str) -> str:
    return (text or "")[:BODY_PREVIEW_CHARS]
