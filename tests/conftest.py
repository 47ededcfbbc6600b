"""Pytest configuration and fixtures for NoteCanvas tests."""

import json
import pytest
import tempfile
import logging
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

from pubsub import pub

from notecanvas.config import NoteCanvasConfig
from notecanvas.models import ContentUnit, TaskItem
from notecanvas.synthesis import NoteSynthesizer, SeededRandom


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O beyond temp files")
    config.addinivalue_line("markers", "integration: tests spanning several components")


class FakeCompletionEngine:
    """CompletionEngine double returning canned responses in order."""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    async def send_prompt(self, prompt, system_prompt=None, temperature=0.2, max_tokens=2000, json_mode=False):
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "json_mode": json_mode,
        })
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture(autouse=True)
def clear_pubsub():
    """Drop pubsub listeners left behind by a test."""
    yield
    pub.unsubAll()


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def config(temp_data_dir):
    """Default configuration with storage and logs inside the temp dir."""
    cfg = NoteCanvasConfig()
    cfg.set('storage.notes_file', str(Path(temp_data_dir) / "notes.json"))
    cfg.set('logging.file_path', str(Path(temp_data_dir) / "logs" / "notecanvas.log"))
    cfg.set('layout.random_seed', 7)
    return cfg


@pytest.fixture
def fixed_clock():
    return Mock(return_value=datetime(2024, 5, 1, 9, 30, 0))


@pytest.fixture
def synthesizer(fixed_clock):
    return NoteSynthesizer(random_source=SeededRandom(42), clock=fixed_clock)


@pytest.fixture
def fake_engine_factory():
    return FakeCompletionEngine


@pytest.fixture
def categorization_payload():
    """A well-formed categorization response: two groups over three tasks."""
    return json.dumps({
        "tasks": [
            {"text": "Email the quarterly report", "done": False, "category": "work"},
            {"text": "buy milk", "done": False, "category": "grocery_item"},
            {"text": "Book a team offsite", "done": True, "category": "work"},
        ],
        "noteGroups": [
            {"title": "Work", "category": "work", "taskIndices": [0, 2]},
            {"title": "Groceries", "category": "shopping", "taskIndices": [1]},
        ],
        "reasoning": "Work items and shopping items are separate contexts.",
    })


@pytest.fixture
def make_units():
    """Factory for n content units, optionally with children."""
    def _make(count, category=None, children=0, tasks=0):
        units = []
        for i in range(count):
            units.append(ContentUnit(
                title=f"Unit {i}",
                category=category if category is not None else f"category-{i}",
                task_items=[TaskItem(text=f"task {i}.{t}") for t in range(tasks)],
                children=[ContentUnit(title=f"Child {i}.{c}") for c in range(children)],
            ))
        return units
    return _make
