import json
from types import SimpleNamespace

import pytest

from bandflow.models import ClipDescriptor, EnergyLevel, ProjectConfiguration


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeClient:
    """Stands in for genai.Client; only client.aio.models.generate_content is used."""

    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)
        self.aio = SimpleNamespace(models=self.models)

    @property
    def calls(self):
        return self.models.calls


@pytest.fixture(autouse=True)
def no_gemini_credentials(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def config():
    return ProjectConfiguration(title="Summer Tour Teaser", target_duration_seconds=60)


@pytest.fixture
def clips():
    return (
        ClipDescriptor(id="clip-a", name="opener.mp4", duration_seconds=24, energy_level=EnergyLevel.HIGH),
        ClipDescriptor(id="clip-b", name="ballad.mp4", duration_seconds=31, energy_level=EnergyLevel.LOW),
        ClipDescriptor(id="clip-c", name="encore.mp4", duration_seconds=18, energy_level=EnergyLevel.MEDIUM),
    )


@pytest.fixture
def two_scene_payload():
    return json.dumps({
        "scenes": [
            {
                "clipId": "clip-a",
                "startTime": 2.5,
                "duration": 12,
                "transition": "jump-cut",
                "description": "Crowd jumps on the drop",
            },
            {
                "clipId": "clip-b",
                "startTime": 0,
                "duration": 8.5,
                "transition": "cross-dissolve",
                "description": "Singer close-up with the logo fading in",
            },
        ],
        "soundtrackEnhancement": "Lift the vocals and widen the crowd noise in the chorus.",
    })
