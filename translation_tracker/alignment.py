"""Vertical alignment of paired source and target sections."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import AlignmentConfig
from .interfaces import LayoutBox, LayoutSurface
from .scheduler import AsyncioScheduler, Debouncer, Scheduler

log = logging.getLogger(__name__)


@dataclass
class AlignmentResult:
    """Outcome of aligning one section pair."""
    section_number: int
    steps: int = 0
    converged: bool = True
    skipped: bool = False


class SectionAligner:
    """Keeps source and target section boxes at equal heights.

    Setting a calculated minimum height does not guarantee equal rendered
    heights for every kind of section, so the shorter side grows in fixed
    steps until both match or the step bound is hit.
    """

    def __init__(
        self,
        surface: LayoutSurface,
        config: Optional[AlignmentConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """Initialize aligner.

        Args:
            surface: Paired source and target columns
            config: Alignment settings (defaults if None)
            scheduler: Timer source for the debounced alignment
        """
        self.surface = surface
        self.config = config or AlignmentConfig()
        self.skip_tags = {tag.lower() for tag in self.config.skip_tags}
        self.scheduler = scheduler or AsyncioScheduler()
        self.debounce_align_section_pairs = Debouncer(
            self.align_section_pairs, self.config.debounce, self.scheduler, "section alignment"
        )
        self.last_results: List[AlignmentResult] = []

    def on_content_change(self):
        self.debounce_align_section_pairs()

    def on_resize(self):
        self.debounce_align_section_pairs()

    def align_titles(self):
        """Set both title boxes to the bigger of the two heights."""
        pair = self.surface.title_pair()
        if pair is None:
            return

        source_title, target_title = pair
        source_title.set_min_height(None)
        target_title.set_min_height(None)

        height = max(source_title.height, target_title.height)
        source_title.set_min_height(height)
        target_title.set_min_height(height)

    def align_section_pairs(self) -> List[AlignmentResult]:
        """Align the titles and every section pair.

        Returns:
            Results for the aligned pairs
        """
        self.align_titles()

        results = []
        for section_number, source_box, target_box in self.surface.section_pairs():
            if target_box is None:
                log.warning("Invalid source section %s found. Alignment may go wrong", section_number)
                continue
            results.append(self.align_section_pair(section_number, source_box, target_box))

        self.last_results = results
        return results

    def align_section_pair(
        self,
        section_number: int,
        source_box: LayoutBox,
        target_box: LayoutBox,
    ) -> AlignmentResult:
        """Make the rendered heights of a section pair equal.

        Args:
            section_number: Section number, for logging
            source_box: Source section box
            target_box: Target section box

        Returns:
            AlignmentResult
        """
        if target_box.tag.lower() in self.skip_tags or source_box.tag.lower() in self.skip_tags:
            # min-height is undefined for tables
            return AlignmentResult(section_number, skipped=True)

        if target_box.tag.lower() == "figure":
            source_caption = source_box.caption()
            target_caption = target_box.caption()
            if source_caption is None or target_caption is None:
                return AlignmentResult(section_number, skipped=True)
            source_box, target_box = source_caption, target_caption

        source_box.set_min_height(None)
        target_box.set_min_height(None)

        if source_box.height == target_box.height:
            return AlignmentResult(section_number)

        if target_box.height < source_box.height:
            shorter, taller = target_box, source_box
        else:
            shorter, taller = source_box, target_box

        height = shorter.height
        steps = 0
        while shorter.height != taller.height:
            if steps == self.config.max_steps:
                log.warning(
                    "Alignment attempt for section %s is not succeeding after %d steps. Aborting.",
                    section_number,
                    steps,
                )
                return AlignmentResult(section_number, steps=steps, converged=False)

            height += self.config.step
            shorter.set_min_height(height)
            taller.set_min_height(height)
            steps += 1

        return AlignmentResult(section_number, steps=steps)
