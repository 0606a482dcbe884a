"""
Unit tests for PreviewPublisher: payload shape, retry on transient
failures, and error reporting. Network is replaced by httpx.MockTransport.
"""
import json

import httpx
import pytest

from core.config import Settings
from core.export.preview import PreviewPublisher
from core.roster.errors import PreviewPublishError

ENDPOINT = "https://preview.example.test/api/create-sheet"


@pytest.fixture
def settings():
    return Settings(
        PREVIEW_ENDPOINT_URL=ENDPOINT,
        PREVIEW_API_TOKEN="secret",
        PREVIEW_RETRY_MAX_ATTEMPTS=3,
        PREVIEW_RETRY_MIN_WAIT_SECONDS=0,
        PREVIEW_RETRY_MAX_WAIT_SECONDS=0,
    )


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_publish_posts_rows_and_title(settings):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"url": "https://docs.example.test/sheet/abc"})

    rows = [["USN", "Full Name"], ["2022-2026 Batch (Year 4)"], ["1MS22CS001", "Asha Rao"]]
    url = PreviewPublisher(settings=settings, client=_client(handler)).publish(rows, title="Roster")

    assert url == "https://docs.example.test/sheet/abc"
    assert seen["url"] == ENDPOINT
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {"data": rows, "title": "Roster"}


def test_default_title_from_settings(settings):
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"url": "https://docs.example.test/x"})

    PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])
    assert seen["body"]["title"] == settings.EXPORT_TITLE


def test_retries_server_errors_then_succeeds(settings):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"url": "https://docs.example.test/ok"})

    url = PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])
    assert url == "https://docs.example.test/ok"
    assert len(calls) == 3


def test_gives_up_after_max_attempts(settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    with pytest.raises(PreviewPublishError):
        PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])
    assert len(calls) == 3


def test_transport_errors_are_retried(settings):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PreviewPublishError):
        PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])
    assert len(calls) == 3


def test_client_errors_are_not_retried(settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"error": "bad data"})

    with pytest.raises(PreviewPublishError, match="HTTP 400"):
        PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])
    assert len(calls) == 1


def test_reply_without_url(settings):
    def handler(request):
        return httpx.Response(200, json={"ok": True})

    with pytest.raises(PreviewPublishError, match="url"):
        PreviewPublisher(settings=settings, client=_client(handler)).publish([["USN"]])


def test_not_configured():
    publisher = PreviewPublisher(settings=Settings(PREVIEW_ENDPOINT_URL=""))
    assert not publisher.enabled
    with pytest.raises(PreviewPublishError, match="not configured"):
        publisher.publish([["USN"]])
