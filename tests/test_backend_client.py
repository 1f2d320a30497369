"""HostedBackend request building, with the HTTP session replaced by a recorder."""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from backend import BackendConfigError, BackendError, HostedBackend, build_backend
from config import Settings


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None) -> None:
        self.status_code = status
        self._body = body
        self.content = b"" if body is None else json.dumps(body).encode()

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no body")
        return self._body


class RecordingSession:
    def __init__(self, *responses: FakeResponse) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            return FakeResponse(200, [])
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _backend(*responses: FakeResponse) -> tuple[HostedBackend, RecordingSession]:
    session = RecordingSession(*responses)
    return HostedBackend("https://demo.example.co/", "anon-key", session=session), session  # type: ignore[arg-type]


def test_sign_in_stores_access_token():
    backend, http = _backend(
        FakeResponse(200, {"access_token": "tok", "user": {"id": "u1", "email": "a@example.com"}})
    )

    session = backend.sign_in("a@example.com", "secret1")

    assert session.user.id == "u1"
    assert backend.access_token == "tok"
    call = http.calls[0]
    assert call["url"] == "https://demo.example.co/auth/v1/token"
    assert call["params"] == {"grant_type": "password"}
    assert call["headers"]["apikey"] == "anon-key"


def test_sign_in_fetches_user_when_token_response_omits_it():
    backend, http = _backend(
        FakeResponse(200, {"access_token": "tok"}),
        FakeResponse(200, {"id": "u2", "email": "b@example.com"}),
    )

    session = backend.sign_in("b@example.com", "secret1")

    assert session.user.id == "u2"
    assert http.calls[1]["url"] == "https://demo.example.co/auth/v1/user"
    assert http.calls[1]["headers"]["Authorization"] == "Bearer tok"


def test_sign_up_without_session_when_confirmation_pending():
    backend, _ = _backend(FakeResponse(200, {"id": "u1", "email": "a@example.com"}))

    assert backend.sign_up("a@example.com", "secret1") is None


def test_select_builds_filters_and_order():
    backend, http = _backend(FakeResponse(200, [{"id": "1"}]))
    backend.access_token = "tok"

    rows = backend.select("transactions", {"user_id": "u1"}, order="created_at", descending=True)

    assert rows == [{"id": "1"}]
    call = http.calls[0]
    assert call["method"] == "GET"
    assert call["url"].endswith("/rest/v1/transactions")
    assert call["params"] == [("select", "*"), ("user_id", "eq.u1"), ("order", "created_at.desc")]
    assert call["headers"]["Authorization"] == "Bearer tok"


def test_insert_requests_representation():
    backend, http = _backend(FakeResponse(201, [{"id": "9", "amount": 5}]))

    assert backend.insert("budgets", [{"category": "Food"}]) == [{"id": "9", "amount": 5}]
    assert http.calls[0]["headers"]["Prefer"] == "return=representation"
    assert http.calls[0]["json"] == [{"category": "Food"}]


def test_update_serialises_boolean_filters():
    backend, http = _backend(FakeResponse(200, [{"id": "1"}]))

    backend.update("user_profiles", {"username": "x"}, {"currency_changed": False})

    assert http.calls[0]["params"] == [("currency_changed", "eq.false")]


def test_delete_requires_a_filter():
    backend, http = _backend()

    with pytest.raises(BackendError):
        backend.delete("transactions", {})
    assert http.calls == []


def test_error_body_becomes_backend_error():
    backend, _ = _backend(FakeResponse(400, {"error_description": "Invalid login credentials"}))

    with pytest.raises(BackendError, match="Invalid login credentials") as excinfo:
        backend.sign_in("a@example.com", "nope")
    assert excinfo.value.status == 400


def test_connection_failures_are_wrapped():
    backend, _ = _backend(requests.ConnectionError("boom"))  # type: ignore[arg-type]

    with pytest.raises(BackendError, match="Connection failed"):
        backend.select("transactions")


def test_sign_out_clears_token_even_on_error():
    backend, _ = _backend(FakeResponse(500, {"message": "down"}))
    backend.access_token = "tok"

    with pytest.raises(BackendError):
        backend.sign_out()
    assert backend.access_token is None


def test_build_backend_requires_configuration():
    with pytest.raises(BackendConfigError, match="Missing Supabase"):
        build_backend(Settings())

    backend = build_backend(Settings(SUPABASE_URL="https://demo.example.co", SUPABASE_ANON_KEY="anon"))
    assert backend.base_url == "https://demo.example.co"
