from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_BASE_URL, HTTP_TIMEOUT, REQUEST_HEADERS
from .errors import (
    ApiError,
    AuthError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)

logger = logging.getLogger("snooze")

STATUS_ERRORS = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ValidationError,
    422: ValidationError,
}


class ApiClient:
    """Thin wrapper around the stories JSON API.

    One attempt per call: there is no retry adapter mounted on the session,
    and every failure is raised as an :class:`ApiError` subclass.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("POST", path, payload=payload)

    def delete(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("DELETE", path, payload=payload)

    def close(self) -> None:
        self.session.close()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method, url, params=params, json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError(f"Could not reach {self.base_url}: {e}") from e

        if not resp.ok:
            error = _error_from_response(resp)
            logger.warning("%s %s returned %s: %s", method, url, resp.status_code, error.message)
            raise error

        try:
            body = resp.json()
        except ValueError as e:
            raise ServerError(f"Invalid JSON from {path}", resp.status_code) from e
        if not isinstance(body, dict):
            raise ServerError(f"Unexpected response shape from {path}", resp.status_code)
        logger.debug("%s %s OK", method, url)
        return body


def _error_from_response(resp: requests.Response) -> ApiError:
    message = resp.reason or "Request failed"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message") or message
    error_class = STATUS_ERRORS.get(resp.status_code, ServerError)
    return error_class(message, resp.status_code)
