"""
Offline doubles for the google-genai client.

Only the attributes the generation layer reads are modelled:
candidates[0].content.parts[*].inline_data, .text, generated_images,
and the video operation fields done / error / response.generated_videos.
"""
import io
import json
from types import SimpleNamespace

import pytest
from PIL import Image

from storyboard.env_loader import GeminiConfig
from storyboard.generation import GenerationFacade
from storyboard.model_router import ModelRouter
from storyboard.video_jobs import VideoJobPoller


def png_bytes(size=(4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, "PNG")
    return buf.getvalue()


def text_response(payload) -> SimpleNamespace:
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return SimpleNamespace(text=text, candidates=[])


def inline_response(data: bytes, mime_type=None) -> SimpleNamespace:
    parts = [
        SimpleNamespace(text="Here is your image", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type)),
    ]
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def empty_content_response() -> SimpleNamespace:
    parts = [SimpleNamespace(text="I can't draw that", inline_data=None)]
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def video_operation(done=False, error=None, uri=None) -> SimpleNamespace:
    response = None
    if done and not error:
        videos = [SimpleNamespace(video=SimpleNamespace(uri=uri))] if uri else []
        response = SimpleNamespace(generated_videos=videos)
    return SimpleNamespace(done=done, error=error, response=response)


class FakeModels:
    def __init__(self):
        self.calls = []
        self.content = []          # queued generate_content results (or exceptions)
        self.images = None
        self.video_operation = video_operation()
        self.count_tokens_error = None

    def _next(self, queue):
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def generate_content(self, model, contents, config=None):
        self.calls.append(("generate_content", model, contents, config))
        return self._next(self.content)

    def generate_images(self, model, prompt, config=None):
        self.calls.append(("generate_images", model, prompt, config))
        if isinstance(self.images, Exception):
            raise self.images
        return self.images

    def generate_videos(self, model, prompt, image=None, config=None):
        self.calls.append(("generate_videos", model, prompt, image, config))
        return self.video_operation

    def count_tokens(self, model, contents):
        self.calls.append(("count_tokens", model, contents))
        if self.count_tokens_error:
            raise self.count_tokens_error
        return SimpleNamespace(total_tokens=1)


class FakeOperations:
    def __init__(self):
        self.polls = 0
        self.queue = []            # operations returned by successive polls
        self.default = video_operation()

    def get(self, operation):
        self.polls += 1
        if self.queue:
            return self.queue.pop(0)
        return self.default


class FakeClient:
    def __init__(self):
        self.models = FakeModels()
        self.operations = FakeOperations()


class FakeSession:
    def __init__(self, status_code=200, content=b"\x00\x00\x00\x18ftypmp42", content_type="video/mp4"):
        self.status_code = status_code
        self.content = content
        self.content_type = content_type
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers, timeout))
        return SimpleNamespace(
            ok=200 <= self.status_code < 400,
            status_code=self.status_code,
            content=self.content,
            headers={"Content-Type": self.content_type},
        )


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def config():
    return GeminiConfig(api_key="test-key-123", poll_interval=5.0, max_poll_attempts=24)


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def router(client, config, session):
    return ModelRouter(client, config, session=session)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def facade(router, sleep, config):
    poller = VideoJobPoller(router, interval=config.poll_interval, max_attempts=config.max_poll_attempts, sleep=sleep)
    return GenerationFacade(router, poller)
