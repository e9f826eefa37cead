"""Collaborator interfaces consumed by the tracker."""

from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from .models import ContentSource, Issue, SectionContent, SectionState, TranslationProgress


class StructuredEditor(Protocol):
    """The structured document editor holding the target sections."""

    def get_section_content(self, section_number: int) -> Optional[SectionContent]:
        """Live content of a target section, or None while the node is unavailable."""
        ...

    def set_section_content(self, section_number: int, html: str, origin: ContentSource) -> None:
        ...

    def set_user_modifications(self, section_number: int, modified: bool) -> None:
        ...

    def add_issues(self, section_id: Union[int, str], issues: List[Issue]) -> None:
        ...

    def resolve_issues(self, section_id: Union[int, str], names: List[str]) -> None:
        ...

    def notify(self, message: str) -> None:
        """Show a user-visible notification."""
        ...


class MTProvider(Protocol):
    """Machine translation service."""

    async def translate(self, html: str, provider_id: str) -> str:
        ...


class PersistenceStore(Protocol):
    """Storage of translation units and the translation record."""

    async def load_saved_translation_units(self, translation_id: Any) -> Dict[int, Dict[str, Any]]:
        ...

    async def save(self, section_number: int, state: SectionState) -> None:
        ...

    async def save_progress(self, progress: TranslationProgress) -> None:
        ...


class ProgressSink(Protocol):
    """Consumer of aggregate progress updates."""

    def publish(self, progress: TranslationProgress) -> None:
        ...


class LayoutBox(Protocol):
    """Rendered box of a section or title."""

    tag: str

    @property
    def height(self) -> float:
        """Rendered height: the larger of natural and minimum height."""
        ...

    def set_min_height(self, height: Optional[float]) -> None:
        """Set the minimum height, or clear it with None."""
        ...

    def caption(self) -> Optional["LayoutBox"]:
        """Caption box of a figure, if any."""
        ...


class LayoutSurface(Protocol):
    """Paired source and target columns."""

    def title_pair(self) -> Optional[Tuple[LayoutBox, LayoutBox]]:
        ...

    def section_pairs(self) -> List[Tuple[int, LayoutBox, Optional[LayoutBox]]]:
        """(section number, source box, target box or None) for every source section."""
        ...
