"""HTTP client for the hosted auth + table store (Supabase REST API)."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence

import requests

from config import Settings, get_settings
from core.models import AuthSession, AuthUser

__all__ = [
    "BackendConfigError",
    "BackendError",
    "HostedBackend",
    "build_backend",
]

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Raised when the hosted backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


class BackendConfigError(BackendError):
    """Raised when the backend URL or anon key is missing."""


def _error_from_response(response: requests.Response) -> BackendError:
    try:
        body = response.json()
    except ValueError:
        body = None

    message = ""
    code: str | None = None
    if isinstance(body, Mapping):
        message = str(
            body.get("error_description")
            or body.get("msg")
            or body.get("message")
            or body.get("error")
            or ""
        )
        raw_code = body.get("code") or body.get("error_code")
        code = str(raw_code) if raw_code is not None else None
    if not message:
        message = f"Request failed with status {response.status_code}"
    return BackendError(message, status=response.status_code, code=code)


class HostedBackend:
    """Thin wrapper over the hosted backend's auth and REST endpoints."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.http = session or requests.Session()
        self.access_token: str | None = None

    def _headers(self, token: str | None = None, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        params: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                headers=self._headers(token, prefer),
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Backend request %s %s failed: %s", method, path, exc)
            raise BackendError(f"Connection failed: {exc}") from exc

        if not response.ok:
            error = _error_from_response(response)
            logger.warning("Backend %s %s returned %s: %s", method, path, response.status_code, error)
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # Auth

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Create an account. Returns a session when no e-mail confirmation is pending."""

        body = self._request("POST", "/auth/v1/signup", json={"email": email, "password": password})
        if isinstance(body, Mapping) and body.get("access_token"):
            return self._session_from(body)
        return None

    def sign_in(self, email: str, password: str) -> AuthSession:
        body = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if not isinstance(body, Mapping) or not body.get("access_token"):
            raise BackendError("Unexpected response from the authentication service")
        session = self._session_from(body)
        if not session.user.id:
            session = replace(session, user=self.get_user(session.access_token))
        self.access_token = session.access_token
        return session

    def sign_out(self) -> None:
        if not self.access_token:
            return
        try:
            self._request("POST", "/auth/v1/logout")
        finally:
            self.access_token = None

    def get_user(self, access_token: str | None = None) -> AuthUser:
        body = self._request("GET", "/auth/v1/user", token=access_token)
        if not isinstance(body, Mapping):
            raise BackendError("Unexpected response from the authentication service")
        return AuthUser.from_row(body)

    def verify_password(self, email: str, password: str) -> None:
        """Re-authenticate without replacing the current session token."""

        self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    def use_session(self, session: AuthSession) -> None:
        self.access_token = session.access_token

    @staticmethod
    def _session_from(body: Mapping[str, Any]) -> AuthSession:
        user = body.get("user") or {}
        return AuthSession(
            access_token=str(body["access_token"]),
            refresh_token=body.get("refresh_token"),
            user=AuthUser.from_row(user),
        )

    # Tables

    @staticmethod
    def _filter_params(filters: Mapping[str, Any] | None) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        for column, value in (filters or {}).items():
            if isinstance(value, bool):
                value = str(value).lower()
            params.append((column, f"eq.{value}"))
        return params

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        order: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        params = [("select", "*"), *self._filter_params(filters)]
        if order:
            params.append(("order", f"{order}.{'desc' if descending else 'asc'}"))
        body = self._request("GET", f"/rest/v1/{table}", params=params)
        return list(body or [])

    def insert(self, table: str, rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        payload = [dict(row) for row in rows]
        if not payload:
            return []
        body = self._request(
            "POST",
            f"/rest/v1/{table}",
            json=payload,
            prefer="return=representation",
        )
        return list(body or [])

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        body = self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=self._filter_params(filters),
            json=dict(values),
            prefer="return=representation",
        )
        return list(body or [])

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        if not filters:
            raise BackendError("Refusing to delete without a filter")
        self._request("DELETE", f"/rest/v1/{table}", params=self._filter_params(filters))


def build_backend(settings: Settings | None = None) -> HostedBackend:
    settings = settings or get_settings()
    if not settings.backend_configured:
        raise BackendConfigError("Missing Supabase environment variables")
    return HostedBackend(
        str(settings.supabase_url),
        str(settings.supabase_anon_key),
        timeout=settings.request_timeout,
    )
