import logging
from typing import Any, Dict, Optional

import requests

from src.client.form import AttendanceForm, Message
from src.client.session import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:4000"


class AttendanceClient:
    """
    Talks to the attendance relay on behalf of one teacher.

    The token store is passed in, so the same client works against memory (tests)
    or a file (real use). Every method returns a Message and never retries.
    """

    def __init__(
        self,
        store: TokenStore,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[Any] = None,
        timeout: float = 30.0,
    ):
        self.store = store
        self.base_url = base_url.rstrip("/")
        # Anything with a requests-style post(url, json=, headers=, timeout=)
        self.http = session or requests.Session()
        self.timeout = timeout

    @property
    def logged_in(self) -> bool:
        return bool(self.store.get())

    def _post(self, path: str, body: Dict[str, Any], token: Optional[str] = None):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return self.http.post(f"{self.base_url}{path}", json=body, headers=headers, timeout=self.timeout)

    @staticmethod
    def _json(response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _ok(response) -> bool:
        return 200 <= response.status_code < 300

    def register(
        self,
        username: str,
        password: str,
        web_app_url: str,
        web_app_secret: str,
        sheet_url: str = "",
    ) -> Message:
        body = {
            "username": username,
            "password": password,
            "sheetUrl": sheet_url,
            "webAppUrl": web_app_url,
            "webAppSecret": web_app_secret,
        }
        try:
            response = self._post("/api/register", body)
        except requests.RequestException:
            return Message(type="error", text="Network error")

        data = self._json(response)
        if not self._ok(response):
            return Message(type="error", text="Error: " + str(data.get("error") or data))
        return Message(type="success", text="Registered OK, please login now.")

    def login(self, username: str, password: str) -> Message:
        try:
            response = self._post("/api/login", {"username": username, "password": password})
        except requests.RequestException:
            return Message(type="error", text="Network error")

        data = self._json(response)
        if not self._ok(response) or not data.get("token"):
            return Message(type="error", text=data.get("error") or "Login failed")

        self.store.set(data["token"])
        return Message(type="success", text="Logged in.")

    def logout(self) -> Message:
        self.store.clear()
        return Message(type="info", text="Logged out.")

    def verify_webapp(self, web_app_url: str, web_app_secret: str) -> Message:
        token = self.store.get()
        if not token:
            return Message(type="error", text="Not logged in. Please login first.")
        try:
            response = self._post(
                "/api/verify-webapp",
                {"webAppUrl": web_app_url, "webAppSecret": web_app_secret},
                token=token,
            )
        except requests.RequestException:
            return Message(type="error", text="Network error or server not reachable.")

        data = self._json(response)
        if not self._ok(response):
            return Message(type="error", text=data.get("error") or data.get("detail") or "Verification failed")
        return Message(type="success", text="Web app verified.")

    def submit(self, form: AttendanceForm) -> Message:
        """
        Send the form to /api/attendance.
        Without a stored token this fails locally, no request is made.
        """
        token = self.store.get()
        if not token:
            return Message(type="error", text="Not logged in. Please login first.")

        try:
            response = self._post("/api/attendance", form.to_payload(), token=token)
        except requests.RequestException as exc:
            logger.error("submit error: %s", exc)
            return Message(type="error", text="Network error or server not reachable.")

        data = self._json(response)
        if not self._ok(response):
            return Message(type="error", text=data.get("error") or data.get("detail") or "Submit failed")
        return Message(type="success", text="Attendance submitted successfully.")
