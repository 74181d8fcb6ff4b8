import base64

import pytest
import requests

from fitcoach import images as images_module
from fitcoach.config import CoachConfig
from fitcoach.images import PLACEHOLDER_IMAGE, ImageGenerator, build_image_prompt, is_food


class FakeResponse:
    def __init__(self, status_code=200, content=b"", text=""):
        self.status_code = status_code
        self.content = content
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(images_module.time, "sleep", calls.append)
    return calls


def install_responses(monkeypatch, *responses):
    queue = list(responses)
    sent = []

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.append({"url": url, "headers": headers, "json": json})
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(images_module.requests, "post", fake_post)
    return sent


def make_generator():
    return ImageGenerator(CoachConfig(hf_token="secret", retry_delay_sec=20, image_model_url="https://example.test/sdxl"))


def test_food_prompts_get_food_photography_framing():
    assert is_food("Grilled Chicken Salad")
    assert build_image_prompt("Oats with banana").startswith("High-quality, realistic food photography of Oats")
    assert not is_food("Push-ups")
    assert "person performing Push-ups exercise" in build_image_prompt("Push-ups")


def test_generate_returns_data_url(monkeypatch, sleeps):
    sent = install_responses(monkeypatch, FakeResponse(200, content=b"PNGDATA"))
    result = make_generator().generate("Squats")
    assert result.image == "data:image/png;base64," + base64.b64encode(b"PNGDATA").decode("ascii")
    assert result.error is None
    assert sent[0]["url"] == "https://example.test/sdxl"
    assert sent[0]["headers"]["Authorization"] == "Bearer secret"
    assert "Squats" in sent[0]["json"]["inputs"]
    assert sleeps == []


def test_retries_once_when_model_is_loading(monkeypatch, sleeps):
    sent = install_responses(
        monkeypatch,
        FakeResponse(503, text='{"error": "Model is currently loading"}'),
        FakeResponse(200, content=b"IMG"),
    )
    result = make_generator().generate("Lunges")
    assert result.error is None
    assert len(sent) == 2
    assert sleeps == [20]


def test_non_loading_error_returns_placeholder(monkeypatch, sleeps):
    sent = install_responses(monkeypatch, FakeResponse(400, text="bad request"))
    result = make_generator().generate("Plank")
    assert result.image == PLACEHOLDER_IMAGE
    assert result.error == "bad request"
    assert len(sent) == 1
    assert sleeps == []


def test_failed_retry_returns_placeholder(monkeypatch, sleeps):
    install_responses(monkeypatch, FakeResponse(503, text="loading"), FakeResponse(503, text="still down"))
    result = make_generator().generate("Plank")
    assert result.image == PLACEHOLDER_IMAGE
    assert "still down" in result.error


def test_network_error_returns_placeholder(monkeypatch, sleeps):
    install_responses(monkeypatch, requests.ConnectionError("no route"))
    result = make_generator().generate("Salad")
    assert result.image == PLACEHOLDER_IMAGE
    assert "no route" in result.error
