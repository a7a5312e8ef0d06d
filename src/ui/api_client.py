"""
Synchronous HTTP client for the Comm-It backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging

import httpx
import streamlit as st

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``error_type`` carries the backend's kind tag (e.g. "INSUFFICIENT_INFO")
    when the server sent one, and ``missing_fields`` the fields the
    extraction step could not infer.
    """

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        error_type: str | None = None,
        missing_fields: list[str] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.category = category
        self.error_type = error_type
        self.missing_fields = missing_fields or []
        self.status_code = status_code
        super().__init__(message)


def _error_from_response(response: httpx.Response) -> APIError:
    """Build an APIError from a non-2xx backend response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return APIError(
            response.text or f"HTTP {response.status_code}",
            category="http",
            status_code=response.status_code,
        )
    return APIError(
        str(body.get("error") or body.get("detail") or f"HTTP {response.status_code}"),
        category="http",
        error_type=body.get("type"),
        missing_fields=body.get("missingFields"),
        status_code=response.status_code,
    )


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON or raise ``APIError`` with
    user-friendly messages for display in the UI.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the Comm-It FastAPI backend.
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=30.0)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post", "put", "delete").
            path: API endpoint path (e.g. "/posts").
            **kwargs: Passed through to httpx (json, files, data, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn src.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            raise _error_from_response(exc.response) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- posts --

    def list_posts(self) -> list[dict]:
        return self._request("get", "/posts").json()

    def get_post(self, post_id: int) -> dict:
        return self._request("get", f"/posts/{post_id}").json()

    def create_post(self, draft: dict) -> dict:
        return self._request("post", "/posts", json=draft).json()

    def update_post(self, post_id: int, changes: dict) -> dict:
        return self._request("put", f"/posts/{post_id}", json=changes).json()

    def delete_post(self, post_id: int) -> dict:
        return self._request("delete", f"/posts/{post_id}").json()

    # -- audio --

    def process_audio(self, audio_bytes: bytes, post_type: str) -> dict:
        """Upload a recorded WAV clip and return the extracted post fields."""
        return self._request(
            "post",
            "/process-audio",
            files={"audio": ("recording.wav", audio_bytes, "audio/wav")},
            data={"type": post_type},
            timeout=120.0,
        ).json()


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    When the base URL changes (e.g. user updates sidebar), a new client
    is created automatically because the cache key includes the parameter.
    """
    return APIClient(base_url=base_url)
