"""Translation progress tracker and MT abuse detection."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config import TrackerConfig
from .exceptions import UnknownSectionError
from .interfaces import PersistenceStore, ProgressSink, StructuredEditor
from .issues import IssueRegistry, NodeId
from .models import (
    ContentSource,
    SavedTranslationUnit,
    SectionState,
    SourceSection,
    TranslationProgress,
)
from .mt_abuse_validator import MT_ABUSE_ISSUE, MTAbuseValidator
from .progress import translation_progress, unmodified_mt_percentage, update_section_progress
from .scheduler import AsyncioScheduler, Debouncer, Scheduler
from .work_queue import WorkQueue

log = logging.getLogger(__name__)


class TranslationTracker:
    """Tracks per-section translation state, progress and MT abuse warnings.

    The editor reports content changes and focus moves by section number.
    Changes are queued and processed in a debounced manner; MT abuse
    validation is delayed until the translator goes quiet or moves to
    another section.
    """

    def __init__(
        self,
        editor: StructuredEditor,
        config: Optional[TrackerConfig] = None,
        scheduler: Optional[Scheduler] = None,
        progress_sink: Optional[ProgressSink] = None,
        validator: Optional[MTAbuseValidator] = None,
    ):
        """Initialize tracker.

        Args:
            editor: Structured editor holding the target sections
            config: Tracker configuration (defaults if None)
            scheduler: Timer source for debounced work (asyncio loop if None)
            progress_sink: Receives aggregate progress on every recalculation
            validator: MT abuse validator (built from config if None)
        """
        self.editor = editor
        self.config = config or TrackerConfig()
        self.source_language = self.config.source_language
        self.target_language = self.config.target_language
        self.scheduler = scheduler or AsyncioScheduler()
        self.progress_sink = progress_sink
        self.validator = validator or MTAbuseValidator.from_config(self.config)

        self.sections: Dict[int, SectionState] = {}
        self.issues = IssueRegistry()
        self.last_focused_section: Optional[int] = None

        self.change_queue = WorkQueue("change")
        self.validation_queue = WorkQueue("validation", warn_on_missing=False)
        self.save_queue = WorkQueue("save")

        self.change_scheduler = Debouncer(
            self.process_change_queue, self.config.change_delay, self.scheduler, "change queue"
        )
        self.validation_scheduler = Debouncer(
            self.process_validation_queue, self.config.validation_delay, self.scheduler, "validation queue"
        )

    # Initialization

    def init(
        self,
        source_sections: Iterable[SourceSection],
        saved_units: Optional[Mapping[Any, Union[SavedTranslationUnit, Dict[str, Any]]]] = None,
        saved_progress: Optional[Union[TranslationProgress, Dict[str, Any]]] = None,
        source_translated_sections: Optional[Iterable[int]] = None,
    ) -> int:
        """Create section states for a translation session.

        Args:
            source_sections: Sections of the decomposed source document
            saved_units: Persisted translation units keyed by section number
            saved_progress: Persisted aggregate progress, compared after restore
            source_translated_sections: Sections whose content was copied from
                source; looked up in the editor if None

        Returns:
            Number of restored sections
        """
        units = self._normalize_units(saved_units or {})
        restored = 0
        total = 0

        for section in source_sections:
            state = SectionState(section.section_number)
            state.set_source(section.html)

            unit = units.get(section.section_number)
            if unit:
                if unit.user:
                    state.set_current_provider(ContentSource.from_identifier(unit.user.engine))
                    state.set_user_translation(unit.user.content)
                if unit.mt:
                    # Machine translation, unmodified
                    state.set_current_provider(ContentSource.from_identifier(unit.mt.engine))
                    state.set_unmodified_mt(unit.mt.content)
                    state.mark_unmodified_mt_saved()
                restored += 1
                self.change_queue.push(section.section_number)

            self.sections[section.section_number] = state
            total += 1

        if source_translated_sections is None:
            source_translated_sections = self.get_sections_translated_from_source()
        self.adjust_section_state_for_source_translations(source_translated_sections)

        log.info("Translation tracker initialized for %d sections (%d restored)", total, restored)

        if restored > 0:
            # Restored sections are validated right below, without arming the timer
            self.process_change_queue(schedule_validation=False)
            progress = self.get_translation_progress()
            if saved_progress is not None:
                if isinstance(saved_progress, dict):
                    saved_progress = TranslationProgress.from_dict(saved_progress)
                if not saved_progress.matches(progress):
                    log.error(
                        "Mismatch in restored translation progress. Saved progress was: %s",
                        saved_progress.to_dict(),
                    )
            log.info("Restored translation has progress: %s", progress.to_dict())
            self.process_validation_queue()

        return restored

    async def restore(
        self,
        persistence: PersistenceStore,
        translation_id: Any,
        source_sections: Iterable[SourceSection],
        saved_progress: Optional[Union[TranslationProgress, Dict[str, Any]]] = None,
    ) -> int:
        """Load persisted translation units and initialize from them."""
        units = await persistence.load_saved_translation_units(translation_id)
        return self.init(source_sections, units, saved_progress)

    @staticmethod
    def _normalize_units(
        units: Mapping[Any, Union[SavedTranslationUnit, Dict[str, Any]]],
    ) -> Dict[int, SavedTranslationUnit]:
        normalized = {}
        for key, unit in units.items():
            if isinstance(unit, dict):
                unit = SavedTranslationUnit.from_dict(unit)
            normalized[int(key)] = unit
        return normalized

    def get_sections_translated_from_source(self) -> List[int]:
        """Section numbers whose live content was copied from the source section."""
        section_numbers = []
        for section_number in self.sections:
            content = self.editor.get_section_content(section_number)
            if content and not content.is_placeholder and content.origin.is_copied_from_source:
                section_numbers.append(section_number)
        return section_numbers

    def adjust_section_state_for_source_translations(self, section_numbers: Iterable[int]):
        """Use the source content as baseline for sections copied from source.

        Content copied from source is not persisted as machine translation,
        so restored sections have nothing to compare the user translation to.
        """
        for section_number in section_numbers:
            state = self.get_section_state(section_number)
            state.set_current_provider(ContentSource.copied_from_source())
            state.set_unmodified_mt(state.source.html)

    # Editor events

    def on_section_change(self, section_number: int):
        """Handle a content change of a target section."""
        if section_number not in self.sections:
            log.debug("Ignoring change for unknown section %s", section_number)
            return

        self.push_to_change_queue(section_number)
        self.push_to_save_queue(section_number)
        self.change_scheduler()

    def on_section_focus(self, section_number: int):
        """Handle focus moving to a target section.

        Moving to another section runs the delayed validations right away.
        """
        if self.last_focused_section != section_number:
            if not self.validation_scheduler.flush():
                self.process_validation_queue()

        self.last_focused_section = section_number

    # Change processing

    def process_change_queue(self, schedule_validation: bool = True) -> int:
        """Process every queued section change.

        Args:
            schedule_validation: Arm the delayed validation for changed sections

        Returns:
            Number of processed sections
        """
        return self.change_queue.drain(
            lambda section_number: self.process_section_change(section_number, schedule_validation)
        )

    def process_section_change(self, section_number: int, schedule_validation: bool = True):
        """Reconcile a section state with the live editor content.

        Args:
            section_number: Section number
            schedule_validation: Arm the delayed validation when the section is queued for it
        """
        state = self.sections.get(section_number)
        content = self.editor.get_section_content(section_number)
        if state is None or content is None:
            # Node is being modified; the next change event will queue it again
            log.debug("No section model for section %s, skipping", section_number)
            return

        if content.is_placeholder:
            # Section turned into a placeholder, e.g. by undo
            state.reset()
            self.remove_section_from_save_queue(section_number)
            self.remove_section_from_validation_queue(section_number)
            if state.mt_abuse_warning:
                state.mt_abuse_warning = False
                self.set_translation_issues(section_number, False)
            return

        fresh_translation = False
        if state.current_provider != content.origin:
            # Fresh translation or MT engine change
            log.debug("MT engine change for section %s to %s", section_number, content.origin)
            state.set_current_provider(content.origin)
            state.set_user_translation(None)
            fresh_translation = True

        if not state.has_baseline():
            state.set_unmodified_mt(content.html)
            log.debug("Fresh translation for section %s with MT %s", section_number, content.origin)

        if state.user_translation is None or content.html != state.user_html:
            state.set_user_translation(content.html)
            log.debug("Content modified for section %s with MT %s", section_number, content.origin)

        self.editor.set_user_modifications(section_number, state.is_modified())
        self.update_section_progress(section_number)

        if fresh_translation:
            # Delay the validation of a fresh translation until the next action,
            # but run the validations queued for other sections
            self.remove_section_from_validation_queue(section_number)
            self.process_validation_queue()
            self.push_to_validation_queue(section_number)
            return

        self.push_to_validation_queue(section_number)
        if schedule_validation:
            self.validation_scheduler()

    def update_section_progress(self, section_number: int):
        """Recalculate the progress fields of a section."""
        update_section_progress(self.get_section_state(section_number), self.target_language)

    # Validation

    def process_validation_queue(self) -> int:
        """Run every delayed MT abuse validation.

        Returns:
            Number of processed sections
        """
        return self.validation_queue.drain(self._validate_section)

    def _validate_section(self, section_number: int):
        content = self.editor.get_section_content(section_number)
        if content is None or content.is_placeholder:
            return
        if self.validator.is_excluded(content.node_type):
            return

        if self.validate_for_mt_abuse(section_number):
            self.set_mt_abuse_warning(section_number)
        else:
            self.clear_mt_abuse_warning(section_number)

    def validate_for_mt_abuse(self, section_number: int) -> bool:
        """Check if a section crosses the unmodified content threshold."""
        self.update_section_progress(section_number)
        return self.validator.is_abusive(self.get_section_state(section_number))

    def get_mt_threshold_for_section(self, state: SectionState) -> float:
        return self.validator.threshold_for(state)

    def set_mt_abuse_warning(self, section_number: int):
        """Add the MT abuse warning to a section, unless already present."""
        state = self.get_section_state(section_number)
        if state.mt_abuse_warning:
            return

        log.info(
            "Unmodified MT percentage for section %s %d%% crossed the threshold %d",
            section_number,
            round(state.unmodified_percentage * 100),
            round(self.get_mt_threshold_for_section(state) * 100),
        )
        self.editor.add_issues(section_number, [self.validator.build_issue(state)])
        state.mt_abuse_warning = True
        self.set_translation_issues(section_number, True)

    def clear_mt_abuse_warning(self, section_number: int):
        """Resolve the MT abuse warning of a section, if present."""
        state = self.get_section_state(section_number)
        if not state.mt_abuse_warning:
            return

        self.editor.resolve_issues(section_number, [MT_ABUSE_ISSUE])
        state.mt_abuse_warning = False
        self.set_translation_issues(section_number, False)

    # Issues

    def set_translation_issues(self, node_id: NodeId, has_issues: bool):
        """Track or untrack a node with issues.

        Args:
            node_id: Section number or the special values 'title' and 'global'
            has_issues: True if the node has issues
        """
        self.issues.set_issues(node_id, has_issues)

    def get_nodes_with_issues(self) -> List[NodeId]:
        return self.issues.nodes

    # Progress

    def get_translation_progress(self) -> TranslationProgress:
        """Calculate aggregate progress for all sections and publish it."""
        self.process_change_queue()
        progress = translation_progress(self.sections.values(), self.target_language)

        if self.progress_sink is not None:
            self.progress_sink.publish(progress)

        return progress

    def get_unmodified_mt_percentage_in_translation(self) -> float:
        """Percentage of user translation tokens taken unmodified from the baseline."""
        live_sections = []
        for section_number, state in self.sections.items():
            content = self.editor.get_section_content(section_number)
            if content is not None and not content.is_placeholder:
                live_sections.append(state)

        return unmodified_mt_percentage(live_sections, self.target_language)

    # Saving

    async def save(self, persistence: PersistenceStore) -> int:
        """Flush the save queue to the persistence layer.

        Sections that fail to save stay queued for the next flush.

        Returns:
            Number of saved sections
        """
        progress = self.get_translation_progress()
        saved = 0
        failed = []

        for section_number in reversed(self.save_queue.items()):
            self.save_queue.remove(section_number)
            try:
                await persistence.save(section_number, self.get_section_state(section_number))
                saved += 1
            except Exception as e:
                log.error("Failed to save section %s: %s", section_number, e)
                failed.append(section_number)

        for section_number in failed:
            self.push_to_save_queue(section_number)

        await persistence.save_progress(progress)
        log.info("Saved %d sections (%d failed)", saved, len(failed))
        return saved

    # Queues

    def is_section_in_change_queue(self, section_number: int) -> bool:
        return section_number in self.change_queue

    def push_to_change_queue(self, section_number: int):
        self.change_queue.push(section_number)

    def is_section_in_save_queue(self, section_number: int) -> bool:
        return section_number in self.save_queue

    def push_to_save_queue(self, section_number: int):
        self.save_queue.push(section_number)

    def push_to_validation_queue(self, section_number: int):
        self.validation_queue.push(section_number)

    def remove_section_from_save_queue(self, section_number: int):
        self.save_queue.remove(section_number)

    def remove_section_from_validation_queue(self, section_number: int):
        self.validation_queue.remove(section_number)

    def get_save_queue(self) -> List[int]:
        return self.save_queue.items()

    def get_section_state(self, section_number: int) -> SectionState:
        """Get the state of a section.

        Raises:
            UnknownSectionError: If the section was never decomposed
        """
        try:
            return self.sections[section_number]
        except KeyError:
            raise UnknownSectionError(section_number) from None
