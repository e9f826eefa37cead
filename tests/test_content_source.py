import asyncio

import pytest

from translation_tracker.content_source import MT_FAILURE_MESSAGE, ContentSourceManager
from translation_tracker.exceptions import MTProviderError
from translation_tracker.models import ContentSource, SectionContent
from translation_tracker.session import InMemoryEditor

SOURCE = "<p>Foxes are small mammals.</p>"
OPENAI = ContentSource.provider("openai")
DEEPL = ContentSource.provider("deepl")


class FakeMT:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def translate(self, html, provider_id):
        self.calls.append(provider_id)
        if self.fail:
            raise RuntimeError("service unavailable")
        return f"<p>[{provider_id}] Los zorros son pequeños mamíferos.</p>"


@pytest.fixture
def editor():
    return InMemoryEditor({1: SectionContent(html="", is_placeholder=True)})


def test_translate_placeholder_uses_preferred_provider(editor):
    mt = FakeMT()
    manager = ContentSourceManager(editor, mt, "openai")

    provider = asyncio.run(manager.translate_placeholder(1, SOURCE))

    assert provider == OPENAI
    assert editor.sections[1].origin == OPENAI
    assert editor.sections[1].html.startswith("<p>[openai]")
    assert editor.notifications == []


def test_mt_failure_falls_back_to_source_copy(editor):
    manager = ContentSourceManager(editor, FakeMT(fail=True), "openai")

    provider = asyncio.run(manager.translate_placeholder(1, SOURCE))

    assert provider.is_copied_from_source
    assert editor.sections[1].html == SOURCE
    assert editor.sections[1].origin.is_copied_from_source
    assert editor.notifications == [MT_FAILURE_MESSAGE]


def test_switching_back_reuses_cached_content(editor):
    mt = FakeMT()
    manager = ContentSourceManager(editor, mt, "openai")
    asyncio.run(manager.translate_placeholder(1, SOURCE))
    editor.edit(1, "<p>Los zorros son mamíferos pequeños.</p>")

    asyncio.run(manager.change_content_source(1, SOURCE, OPENAI, DEEPL))
    asyncio.run(manager.change_content_source(1, SOURCE, DEEPL, OPENAI))

    assert mt.calls == ["openai", "deepl"]
    assert editor.sections[1].html == "<p>Los zorros son mamíferos pequeños.</p>"
    assert editor.sections[1].origin == OPENAI


def test_no_cache_translates_again(editor):
    mt = FakeMT()
    manager = ContentSourceManager(editor, mt, "openai")
    asyncio.run(manager.translate_placeholder(1, SOURCE))
    asyncio.run(manager.change_content_source(1, SOURCE, OPENAI, DEEPL))

    asyncio.run(manager.change_content_source(1, SOURCE, DEEPL, OPENAI, no_cache=True))

    assert mt.calls == ["openai", "deepl", "openai"]


def test_untranslated_source_clears_content(editor):
    manager = ContentSourceManager(editor, FakeMT(), "openai")

    html = asyncio.run(manager.change_content_source(1, SOURCE, None, ContentSource.untranslated()))

    assert html == ""
    assert editor.sections[1].origin.is_untranslated


def test_provider_errors_are_wrapped(editor):
    manager = ContentSourceManager(editor, FakeMT(fail=True), "openai")

    with pytest.raises(MTProviderError) as excinfo:
        asyncio.run(manager.translate_section(SOURCE, DEEPL))

    assert excinfo.value.provider == "deepl"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
