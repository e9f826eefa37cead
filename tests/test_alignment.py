import logging

from translation_tracker.alignment import SectionAligner
from translation_tracker.config import AlignmentConfig
from translation_tracker.scheduler import ManualScheduler


class FakeBox:
    """Box whose rendered height is the larger of natural and minimum height."""

    def __init__(self, natural, tag="p", caption=None, honors_min_height=True):
        self.tag = tag
        self.natural = natural
        self.min_height = None
        self._caption = caption
        self.honors_min_height = honors_min_height

    @property
    def height(self):
        if self.min_height is None or not self.honors_min_height:
            return self.natural
        return max(self.natural, self.min_height)

    def set_min_height(self, height):
        self.min_height = height

    def caption(self):
        return self._caption


class FakeSurface:
    def __init__(self, pairs, titles=None):
        self.pairs = pairs
        self.titles = titles

    def title_pair(self):
        return self.titles

    def section_pairs(self):
        return self.pairs


def make_aligner(pairs, titles=None, scheduler=None):
    return SectionAligner(FakeSurface(pairs, titles), AlignmentConfig(), scheduler or ManualScheduler())


def test_target_grows_in_steps_until_equal():
    source, target = FakeBox(100), FakeBox(70)
    aligner = make_aligner([(1, source, target)])

    result = aligner.align_section_pair(1, source, target)

    assert result.converged
    assert result.steps == 3
    assert source.height == target.height == 100


def test_source_grows_when_shorter():
    source, target = FakeBox(40), FakeBox(95)
    aligner = make_aligner([])

    result = aligner.align_section_pair(1, source, target)

    assert result.steps == 6
    assert source.height == target.height == 100


def test_equal_heights_need_no_steps():
    source, target = FakeBox(50), FakeBox(50)
    source.set_min_height(200)

    result = make_aligner([]).align_section_pair(1, source, target)

    assert result.steps == 0
    assert source.min_height is None
    assert target.min_height is None


def test_alignment_aborts_after_max_steps(caplog):
    source = FakeBox(300)
    target = FakeBox(70, honors_min_height=False)

    with caplog.at_level(logging.WARNING, logger="translation_tracker.alignment"):
        result = make_aligner([]).align_section_pair(4, source, target)

    assert not result.converged
    assert result.steps == 10
    assert "Alignment attempt for section 4 is not succeeding" in caplog.text


def test_tables_are_skipped():
    source, target = FakeBox(100, tag="TABLE"), FakeBox(70, tag="table")

    result = make_aligner([]).align_section_pair(1, source, target)

    assert result.skipped
    assert target.min_height is None


def test_figures_align_captions():
    source_caption, target_caption = FakeBox(30), FakeBox(10)
    source = FakeBox(200, tag="figure", caption=source_caption)
    target = FakeBox(180, tag="figure", caption=target_caption)

    result = make_aligner([]).align_section_pair(1, source, target)

    assert result.steps == 2
    assert target_caption.height == 30
    assert target.min_height is None


def test_figure_without_caption_is_skipped():
    source = FakeBox(200, tag="figure", caption=FakeBox(30))
    target = FakeBox(180, tag="figure")

    assert make_aligner([]).align_section_pair(1, source, target).skipped


def test_align_section_pairs_aligns_titles_and_skips_missing_targets(caplog):
    titles = (FakeBox(40), FakeBox(55))
    pairs = [
        (1, FakeBox(100), FakeBox(70)),
        (2, FakeBox(60), None),
    ]
    aligner = make_aligner(pairs, titles=titles)

    with caplog.at_level(logging.WARNING, logger="translation_tracker.alignment"):
        results = aligner.align_section_pairs()

    assert titles[0].min_height == titles[1].min_height == 55
    assert [result.section_number for result in results] == [1]
    assert aligner.last_results == results
    assert "Invalid source section 2 found" in caplog.text


def test_content_changes_are_debounced():
    source, target = FakeBox(100), FakeBox(70)
    scheduler = ManualScheduler()
    aligner = make_aligner([(1, source, target)], scheduler=scheduler)

    aligner.on_content_change()
    scheduler.advance(0.3)
    aligner.on_resize()
    scheduler.advance(0.3)
    assert aligner.last_results == []

    scheduler.advance(0.5)
    assert len(aligner.last_results) == 1
    assert target.height == 100
