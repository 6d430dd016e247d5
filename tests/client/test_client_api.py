from unittest.mock import MagicMock

import pytest
import requests

from src.client.api import AttendanceClient
from src.client.form import AttendanceForm
from src.client.session import MemoryTokenStore

TEST_PASSWORD = "s3cret-pass"  # matches the `teacher` fixture


@pytest.fixture
def fake_http(make_response):
    """requests.Session stand-in returning a 200 JSON response by default"""
    http = MagicMock(spec=requests.Session)
    http.post.return_value = make_response(200, json_data={"ok": True})
    return http


class TestAttendanceClient:
    def test_submit_without_token_is_local_error(self, fake_http):
        """ Test no request is made when nobody is logged in """
        api = AttendanceClient(MemoryTokenStore(), session=fake_http)
        message = api.submit(AttendanceForm())
        assert message.type == "error"
        assert message.text == "Not logged in. Please login first."
        fake_http.post.assert_not_called()

    def test_submit_sends_bearer_and_payload(self, fake_http):
        form = AttendanceForm(date="2024-01-01")
        form.toggle(1)
        api = AttendanceClient(MemoryTokenStore("tok"), base_url="http://relay/", session=fake_http)

        message = api.submit(form)
        assert message.type == "success"
        args, kwargs = fake_http.post.call_args
        assert args[0] == "http://relay/api/attendance"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["json"] == form.to_payload()

    @pytest.mark.parametrize("body,expected", [
        ({"error": "teacher has no webapp configured"}, "teacher has no webapp configured"),
        ({"detail": "boom"}, "boom"),
        (None, "Submit failed"),
    ])
    def test_submit_error_message(self, fake_http, make_response, body, expected):
        fake_http.post.return_value = make_response(500, json_data=body)
        api = AttendanceClient(MemoryTokenStore("tok"), session=fake_http)
        message = api.submit(AttendanceForm())
        assert message.type == "error"
        assert message.text == expected

    def test_submit_network_error(self, fake_http):
        fake_http.post.side_effect = requests.ConnectionError("refused")
        api = AttendanceClient(MemoryTokenStore("tok"), session=fake_http)
        message = api.submit(AttendanceForm())
        assert message.type == "error"
        assert message.text == "Network error or server not reachable."
        assert fake_http.post.call_count == 1

    def test_login_failure_keeps_store_empty(self, fake_http, make_response):
        fake_http.post.return_value = make_response(401, json_data={"error": "invalid credentials"})
        store = MemoryTokenStore()
        message = AttendanceClient(store, session=fake_http).login("t1", "nope")
        assert message.type == "error"
        assert message.text == "invalid credentials"
        assert store.get() is None

    def test_register_error_message(self, fake_http, make_response):
        fake_http.post.return_value = make_response(409, json_data={"error": "username taken"})
        message = AttendanceClient(MemoryTokenStore(), session=fake_http).register("t1", "p", "u", "s")
        assert message.type == "error"
        assert message.text == "Error: username taken"

    def test_logout_discards_token(self):
        store = MemoryTokenStore("tok")
        api = AttendanceClient(store)
        assert api.logged_in
        assert api.logout().type == "info"
        assert not api.logged_in


class TestClientAgainstService:
    def test_full_flow(self, client, sqlite_db, webapp_calls, make_response):
        """ Test the client drives register, login, verify and submit against the real app """
        store = MemoryTokenStore()
        api = AttendanceClient(store, base_url="http://testserver", session=client)

        registered = api.register("t1", TEST_PASSWORD, "https://example.com/hook", "hook-secret")
        assert registered.type == "success"

        assert api.submit(AttendanceForm()).text == "Not logged in. Please login first."

        assert api.login("t1", TEST_PASSWORD).type == "success"
        assert store.get()

        webapp_calls.response = make_response(200, text="verified", json_data={"ok": True})
        assert api.verify_webapp("https://example.com/hook", "hook-secret").type == "success"

        form = AttendanceForm(date="2024-01-01")
        for roll in (1, 2, 3):
            form.toggle(roll)
        webapp_calls.response = make_response(200, text="saved")
        message = api.submit(form)
        assert message.type == "success"
        assert message.text == "Attendance submitted successfully."
        assert webapp_calls.calls[-1]["json"]["presentMatrix"] == ["1", "1", "1"] + ["0"] * 97

        api.logout()
        assert api.submit(form).type == "error"
