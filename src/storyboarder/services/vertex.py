"""Shared plumbing for Gemini models on Vertex AI."""

import logging
from typing import Any, Optional

import google.auth
import google.auth.transport.requests
import requests

from ..config import config
from ..errors import ContentBlockedError, QuotaExceededError, ServiceError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


class VertexClient:
    """Base client for ``generateContent`` calls over the Vertex AI REST API."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the client.

        Args:
            project_id: Google Cloud project ID.
            location: Vertex AI location ('global' or a region).
            timeout: HTTP timeout in seconds.
        """
        self._project_id = project_id or config.google_cloud_project
        self._location = location or config.google_cloud_location
        self._timeout = timeout or config.request_timeout
        self._credentials = None

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def location(self) -> str:
        return self._location

    def endpoint(self, model: str) -> str:
        host = (
            "aiplatform.googleapis.com"
            if self._location == "global"
            else f"{self._location}-aiplatform.googleapis.com"
        )
        return (
            f"https://{host}/v1/projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{model}:generateContent"
        )

    def _token(self) -> str:
        if self._credentials is None:
            self._credentials, _ = google.auth.default(scopes=SCOPES)
        if not self._credentials.valid:
            self._credentials.refresh(google.auth.transport.requests.Request())
        return self._credentials.token

    def generate_content(self, model: str, body: dict) -> dict:
        """POST a generateContent request and return the decoded response.

        Raises:
            QuotaExceededError: On HTTP 429 or RESOURCE_EXHAUSTED.
            ContentBlockedError: If the prompt or every candidate was blocked.
            ServiceError: On any other HTTP or network failure.
        """
        headers = {
            "Authorization": f"Bearer {self._token()}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.endpoint(model),
                json=body,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise ServiceError(f"Network error: {e}") from e

        if response.status_code != 200:
            error_msg = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"Vertex AI error ({model}): {error_msg}")
            if response.status_code == 429 or "RESOURCE_EXHAUSTED" in response.text:
                raise QuotaExceededError(error_msg, status_code=response.status_code)
            raise ServiceError(error_msg, status_code=response.status_code)

        data = response.json()
        block_reason = data.get("promptFeedback", {}).get("blockReason")
        if block_reason:
            raise ContentBlockedError(f"Prompt blocked: {block_reason}")
        return data


def inline_parts(data: dict) -> list[dict[str, Any]]:
    """Return the inline-data parts of the first candidate.

    Raises:
        ContentBlockedError: If the candidate stopped on a safety filter.
        ServiceError: If the response holds no candidate.
    """
    candidates = data.get("candidates") or []
    if not candidates:
        raise ServiceError("No candidates in response")

    candidate = candidates[0]
    finish_reason = candidate.get("finishReason", "")
    if finish_reason in ("SAFETY", "PROHIBITED_CONTENT", "IMAGE_SAFETY", "BLOCKLIST"):
        raise ContentBlockedError(f"Output blocked: {finish_reason}")

    parts = (candidate.get("content") or {}).get("parts") or []
    return [part["inlineData"] for part in parts if "inlineData" in part]
