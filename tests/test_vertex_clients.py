import base64
import io
import wave

import pytest
import requests

from storyboarder.errors import ContentBlockedError, QuotaExceededError, ServiceError
from storyboarder.models import AspectRatio, ImageResolution
from storyboarder.services import vertex
from storyboarder.services.image import VertexImageClient
from storyboarder.services.speech import VertexSpeechClient, pcm_to_wav

from fakes import image


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


def _inline(mime_type, data):
    return {
        "candidates": [{
            "content": {"parts": [
                {"text": "here you go"},
                {"inlineData": {"mimeType": mime_type, "data": base64.b64encode(data).decode()}},
            ]},
            "finishReason": "STOP",
        }]
    }


@pytest.fixture
def posts(monkeypatch):
    """Record POSTs and answer them from a queue of responses."""
    calls = []
    responses = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers})
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(vertex.VertexClient, "_token", lambda self: "token")
    monkeypatch.setattr(vertex.requests, "post", fake_post)
    return calls, responses


def _image_client(**kwargs):
    return VertexImageClient(
        project_id="proj", location="global", model="img-pro", fallback_model="img-flash", **kwargs
    )


def test_image_request_sends_references_before_prompt(posts):
    calls, responses = posts
    responses.append(FakeResponse(payload=_inline("image/png", b"png-bytes")))

    asset = _image_client().generate_image(
        "a bottle on a beach",
        AspectRatio.PORTRAIT,
        ImageResolution.RES_2K,
        [image("start"), image("model-1")],
    )

    assert asset.data == b"png-bytes"
    assert asset.mime_type == "image/png"

    call = calls[0]
    assert call["url"] == (
        "https://aiplatform.googleapis.com/v1/projects/proj/locations/global/"
        "publishers/google/models/img-pro:generateContent"
    )
    assert call["headers"]["Authorization"] == "Bearer token"
    parts = call["json"]["contents"][0]["parts"]
    assert [base64.b64decode(p["inlineData"]["data"]) for p in parts[:2]] == [b"start", b"model-1"]
    assert parts[2] == {"text": "a bottle on a beach"}
    assert call["json"]["generationConfig"]["imageConfig"] == {
        "aspectRatio": "9:16",
        "imageSize": "2K",
    }


def test_regional_endpoint():
    client = VertexImageClient(project_id="proj", location="us-central1", model="m")
    assert client.endpoint("m").startswith("https://us-central1-aiplatform.googleapis.com/")


def test_quota_falls_back_without_image_size(posts):
    calls, responses = posts
    responses.append(FakeResponse(429, text="RESOURCE_EXHAUSTED"))
    responses.append(FakeResponse(payload=_inline("image/png", b"flash")))

    asset = _image_client().generate_image("prompt", AspectRatio.LANDSCAPE, ImageResolution.RES_4K)

    assert asset.data == b"flash"
    assert calls[1]["url"].endswith("/img-flash:generateContent")
    assert "imageSize" not in calls[1]["json"]["generationConfig"]["imageConfig"]


def test_quota_without_fallback_raises(posts):
    _, responses = posts
    responses.append(FakeResponse(429, text="quota"))

    client = VertexImageClient(project_id="proj", location="global", model="m", fallback_model="")
    with pytest.raises(QuotaExceededError) as exc:
        client.generate_image("prompt")
    assert exc.value.status_code == 429


def test_blocked_prompt_and_candidate(posts):
    _, responses = posts
    responses.append(FakeResponse(payload={"promptFeedback": {"blockReason": "SAFETY"}}))
    responses.append(FakeResponse(payload={"candidates": [{"finishReason": "IMAGE_SAFETY"}]}))

    client = _image_client()
    with pytest.raises(ContentBlockedError):
        client.generate_image("prompt")
    with pytest.raises(ContentBlockedError):
        client.generate_image("prompt")


def test_http_network_and_empty_failures(posts):
    _, responses = posts
    responses.append(FakeResponse(500, text="internal"))
    responses.append(requests.ConnectionError("connection reset"))
    responses.append(FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": "no"}]}}]}))

    client = _image_client()
    with pytest.raises(ServiceError, match="500"):
        client.generate_image("prompt")
    with pytest.raises(ServiceError, match="Network error"):
        client.generate_image("prompt")
    with pytest.raises(ServiceError, match="No image data"):
        client.generate_image("prompt")


def test_empty_prompt_rejected():
    with pytest.raises(ValueError):
        _image_client().generate_image("  ")


def test_missing_project_rejected(monkeypatch):
    monkeypatch.setattr(vertex.config, "google_cloud_project", "")
    with pytest.raises(ValueError):
        VertexImageClient(model="m")


def test_speech_wraps_pcm_as_wav(posts):
    calls, responses = posts
    pcm = b"\x01\x00" * 240
    responses.append(FakeResponse(payload=_inline("audio/L16;codec=pcm;rate=16000", pcm)))

    client = VertexSpeechClient(project_id="proj", location="global", model="tts")
    asset = client.generate_speech("Hello there", "Kore")

    voice = calls[0]["json"]["generationConfig"]["speechConfig"]["voiceConfig"]
    assert voice == {"prebuiltVoiceConfig": {"voiceName": "Kore"}}
    assert asset.mime_type == "audio/wav"
    with wave.open(io.BytesIO(asset.data)) as wav:
        assert wav.getframerate() == 16000
        assert wav.getnchannels() == 1
        assert wav.readframes(wav.getnframes()) == pcm


def test_speech_without_audio_fails(posts):
    _, responses = posts
    responses.append(FakeResponse(payload={"candidates": [{"content": {"parts": []}}]}))

    client = VertexSpeechClient(project_id="proj", location="global", model="tts")
    with pytest.raises(ServiceError):
        client.generate_speech("Hello", "Kore")


def test_pcm_to_wav_header():
    data = pcm_to_wav(b"\x00\x00" * 10)
    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WAVE"
