"""
Preview Publisher
=================

Submit flattened rows to a remote "create viewable copy" endpoint and return
the shareable URL it answers with. The endpoint receives
``{"data": [[...], ...], "title": "..."}`` and must reply with ``{"url": ...}``.

Publishing is a separate step from merging: callers run it after a merge
has finished, and a failure here never affects merge output.
"""

from __future__ import annotations

from functools import partial
from typing import Any, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings, get_settings
from core.logger import get_logger
from core.roster.errors import PreviewPublishError

logger = get_logger(__name__)



class _RetryableError(Exception):
    """Transport errors and 5xx replies; retried before giving up."""


def _log_retry(retry_state: Any, endpoint: str) -> None:
    logger.warning(
        "Preview publish retrying (attempt %d) | endpoint=%s | error=%s",
        retry_state.attempt_number,
        endpoint,
        str(retry_state.outcome.exception()) if retry_state.outcome else "unknown",
    )


class PreviewPublisher:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self._settings.PREVIEW_ENDPOINT_URL.strip())

    def publish(self, rows: List[List[str]], title: Optional[str] = None) -> str:
        """
        POST *rows* and return the shareable URL.

        Raises:
            PreviewPublishError: endpoint not configured, request failed after
                retries, or the reply carried no URL.
        """
        s = self._settings
        endpoint = s.PREVIEW_ENDPOINT_URL.strip()
        if not endpoint:
            raise PreviewPublishError("PREVIEW_ENDPOINT_URL is not configured")

        payload = {"data": rows, "title": title or s.EXPORT_TITLE}
        send = retry(
            stop=stop_after_attempt(s.PREVIEW_RETRY_MAX_ATTEMPTS),
            wait=wait_exponential(
                multiplier=1,
                min=s.PREVIEW_RETRY_MIN_WAIT_SECONDS,
                max=s.PREVIEW_RETRY_MAX_WAIT_SECONDS,
            ),
            retry=retry_if_exception_type(_RetryableError),
            before_sleep=partial(_log_retry, endpoint=endpoint),
            reraise=True,
        )(self._post)

        try:
            data = send(endpoint, payload)
        except _RetryableError as e:
            raise PreviewPublishError(f"Preview endpoint failed: {e}") from e

        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url.strip():
            raise PreviewPublishError("Preview endpoint reply has no 'url'")
        logger.info("Preview published: %d row(s) → %s", len(rows), url)
        return url.strip()

    def _post(self, endpoint: str, payload: dict) -> Any:
        headers = {"Content-Type": "application/json"}
        if self._settings.PREVIEW_API_TOKEN:
            headers["Authorization"] = f"Bearer {self._settings.PREVIEW_API_TOKEN}"

        client = self._client or httpx.Client(timeout=httpx.Timeout(self._settings.REQUEST_TIMEOUT, connect=10.0))
        try:
            response = client.post(endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise _RetryableError(str(e)) from e
        finally:
            if self._client is None:
                client.close()

        if response.status_code >= 500:
            raise _RetryableError(f"HTTP {response.status_code}")
        if response.status_code >= 400:
            raise PreviewPublishError(f"Preview endpoint rejected request: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise PreviewPublishError("Preview endpoint reply is not JSON") from e
