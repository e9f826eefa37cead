"""Shared fixtures for translation tracker tests."""

from typing import Dict, List, Optional

import pytest

from translation_tracker.config import TrackerConfig
from translation_tracker.models import SectionContent, SourceSection
from translation_tracker.scheduler import ManualScheduler
from translation_tracker.session import InMemoryEditor
from translation_tracker.tracker import TranslationTracker

SOURCE_HTML = {
    1: "<p>The quick brown fox jumps over the lazy dog near the river bank.</p>",
    2: "<p>Foxes are small omnivorous mammals found on every continent except Antarctica today.</p>",
    3: "<p>Short section.</p>",
}

MT_HTML = "<p>El rápido zorro marrón salta sobre el perro perezoso cerca de la orilla del río.</p>"
EDITED_HTML = "<p>Un zorro veloz de color café brinca por encima de un can dormido junto al agua.</p>"
OTHER_MT_HTML = "<p>El zorro marrón veloz salta por encima del perro perezoso junto a la ribera.</p>"


class RecordingSink:
    """Progress sink keeping every published value."""

    def __init__(self):
        self.published = []

    def publish(self, progress):
        self.published.append(progress)


class FakePersistence:
    """Persistence store recording saves, optionally failing for some sections."""

    def __init__(self, units: Optional[Dict[int, dict]] = None, failing: Optional[List[int]] = None):
        self.units = units or {}
        self.failing = set(failing or [])
        self.saved = {}
        self.progress = []

    async def load_saved_translation_units(self, translation_id):
        return self.units

    async def save(self, section_number, state):
        if section_number in self.failing:
            raise ConnectionError("storage unavailable")
        self.saved[section_number] = state.user_html

    async def save_progress(self, progress):
        self.progress.append(progress)


@pytest.fixture
def source_sections():
    return [SourceSection(number, html) for number, html in SOURCE_HTML.items()]


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def config():
    return TrackerConfig(source_language="en", target_language="es")


@pytest.fixture
def editor():
    return InMemoryEditor({
        number: SectionContent(html="", is_placeholder=True)
        for number in SOURCE_HTML
    })


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def tracker(editor, config, scheduler, sink, source_sections):
    tracker = TranslationTracker(editor, config, scheduler=scheduler, progress_sink=sink)
    editor.connect(on_change=tracker.on_section_change, on_focus=tracker.on_section_focus)
    tracker.init(source_sections)
    return tracker
