"""Detection of insufficiently modified machine translation."""

from typing import Iterable, Optional

from .models import Issue, SectionState
from .progress import unmodified_ratio
from .tokenizer import count_tokens

MT_ABUSE_ISSUE = "mt-abuse"


class MTAbuseValidator:
    """Flags sections whose content is mostly unmodified MT or copied source."""

    def __init__(
        self,
        source_language: str,
        target_language: str,
        unmodified_mt_threshold: float = 0.8,
        unmodified_source_threshold: float = 0.6,
        min_source_tokens: int = 10,
        excluded_node_types: Optional[Iterable[str]] = None,
        guidelines_url: str = "",
    ):
        """Initialize validator.

        Args:
            source_language: Source language code
            target_language: Target language code
            unmodified_mt_threshold: Tolerated unmodified ratio for MT content
            unmodified_source_threshold: Tolerated unmodified ratio for content copied from source
            min_source_tokens: Sections with fewer source tokens are not validated
            excluded_node_types: Node types never validated
            guidelines_url: Help link attached to the warning
        """
        self.source_language = source_language
        self.target_language = target_language
        self.unmodified_mt_threshold = unmodified_mt_threshold
        self.unmodified_source_threshold = unmodified_source_threshold
        self.min_source_tokens = min_source_tokens
        self.excluded_node_types = frozenset(excluded_node_types or ())
        self.guidelines_url = guidelines_url

    @classmethod
    def from_config(cls, config) -> "MTAbuseValidator":
        """Build a validator from a TrackerConfig."""
        return cls(
            source_language=config.source_language,
            target_language=config.target_language,
            unmodified_mt_threshold=config.unmodified_mt_threshold,
            unmodified_source_threshold=config.unmodified_source_threshold,
            min_source_tokens=config.min_source_tokens,
            excluded_node_types=config.excluded_node_types,
            guidelines_url=config.guidelines_url,
        )

    def threshold_for(self, state: SectionState) -> float:
        """Threshold above which content counts as insufficiently modified.

        Content copied from the source section has a lower tolerance than
        content started from machine translation.
        """
        if state.current_provider.is_copied_from_source:
            return self.unmodified_source_threshold
        return self.unmodified_mt_threshold

    def is_excluded(self, node_type: str) -> bool:
        return node_type in self.excluded_node_types

    def unmodified_ratio(self, state: SectionState) -> float:
        return unmodified_ratio(state.unmodified_mt.text, state.user_text, self.target_language)

    def is_abusive(self, state: SectionState) -> bool:
        """Check if a section crosses its unmodified content threshold.

        Args:
            state: Section state to check

        Returns:
            True if the section should carry an MT abuse warning
        """
        source_tokens = count_tokens(state.source.text, self.source_language)
        if source_tokens < self.min_source_tokens:
            # Short sections give unreliable ratios
            return False

        return self.unmodified_ratio(state) > self.threshold_for(state)

    def build_issue(self, state: SectionState) -> Issue:
        """Build the warning issue for a section."""
        percentage = round(self.unmodified_ratio(state) * 100)
        return Issue(
            name=MT_ABUSE_ISSUE,
            message=(
                "Translations with too much unmodified machine translation or copied "
                "source text may be rejected. Review and edit the content before publishing."
            ),
            severity="warning",
            resolvable=True,
            title=f"{percentage}% unmodified content",
            help=self.guidelines_url,
        )
