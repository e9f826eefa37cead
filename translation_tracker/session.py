"""Translation session snapshots and an in-memory editor."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from .exceptions import SessionError
from .models import (
    ContentSource,
    Issue,
    SavedTranslationUnit,
    SectionContent,
    SourceSection,
    TranslationProgress,
)


class InMemoryEditor:
    """Structured editor keeping target sections in a dict.

    Emits change and focus events to connected listeners, the way a real
    editing surface would.
    """

    def __init__(self, sections: Optional[Dict[int, SectionContent]] = None):
        self.sections: Dict[int, SectionContent] = dict(sections or {})
        self.issues: Dict[Union[int, str], Dict[str, Issue]] = {}
        self.modified: Dict[int, bool] = {}
        self.notifications: List[str] = []
        self._change_listeners: List[Callable[[int], Any]] = []
        self._focus_listeners: List[Callable[[int], Any]] = []

    def connect(
        self,
        on_change: Optional[Callable[[int], Any]] = None,
        on_focus: Optional[Callable[[int], Any]] = None,
    ):
        if on_change is not None:
            self._change_listeners.append(on_change)
        if on_focus is not None:
            self._focus_listeners.append(on_focus)

    def get_section_content(self, section_number: int) -> Optional[SectionContent]:
        return self.sections.get(section_number)

    def set_section_content(self, section_number: int, html: str, origin: ContentSource):
        previous = self.sections.get(section_number)
        node_type = previous.node_type if previous else "paragraph"
        self.sections[section_number] = SectionContent(html=html, origin=origin, node_type=node_type)
        self._emit_change(section_number)

    def edit(self, section_number: int, html: str):
        """Change the content of a section, keeping its origin."""
        current = self.sections[section_number]
        self.sections[section_number] = SectionContent(
            html=html,
            origin=current.origin,
            node_type=current.node_type,
        )
        self._emit_change(section_number)

    def make_placeholder(self, section_number: int):
        """Turn a section back into a placeholder, as undo does."""
        current = self.sections.get(section_number)
        node_type = current.node_type if current else "paragraph"
        self.sections[section_number] = SectionContent(html="", is_placeholder=True, node_type=node_type)
        self._emit_change(section_number)

    def focus(self, section_number: int):
        for listener in list(self._focus_listeners):
            listener(section_number)

    def set_user_modifications(self, section_number: int, modified: bool):
        self.modified[section_number] = modified

    def add_issues(self, section_id: Union[int, str], issues: List[Issue]):
        node_issues = self.issues.setdefault(section_id, {})
        for issue in issues:
            node_issues[issue.name] = issue

    def resolve_issues(self, section_id: Union[int, str], names: List[str]):
        node_issues = self.issues.get(section_id, {})
        for name in names:
            node_issues.pop(name, None)
        if not node_issues:
            self.issues.pop(section_id, None)

    def notify(self, message: str):
        self.notifications.append(message)

    def _emit_change(self, section_number: int):
        for listener in list(self._change_listeners):
            listener(section_number)


@dataclass
class TranslationSession:
    """Snapshot of a translation: source sections, live target content and saved units."""
    source_language: str
    target_language: str
    sections: List[SourceSection] = field(default_factory=list)
    target_sections: Dict[int, SectionContent] = field(default_factory=dict)
    saved_units: Dict[int, SavedTranslationUnit] = field(default_factory=dict)
    progress: Optional[TranslationProgress] = None
    title: str = ""
    source_path: str = ""

    @classmethod
    def load(cls, path: str) -> "TranslationSession":
        """Load a session from a YAML or JSON file.

        Raises:
            SessionError: If the file is missing or malformed
        """
        session_path = Path(path)
        if not session_path.exists():
            raise SessionError(f"Session file not found: {path}")

        try:
            with open(session_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SessionError(f"Invalid session file {path}: {e}") from e

        session = cls.from_dict(data)
        session.source_path = str(session_path)
        return session

    @classmethod
    def from_dict(cls, data: Any) -> "TranslationSession":
        if not isinstance(data, dict):
            raise SessionError("Session must be a mapping")

        for key in ("source_language", "target_language", "sections"):
            if key not in data:
                raise SessionError(f"Missing required session field: {key}")

        try:
            saved_units = {
                int(number): SavedTranslationUnit.from_dict(unit or {})
                for number, unit in (data.get("translation_units") or {}).items()
            }

            sections = []
            target_sections = {}
            for entry in data["sections"]:
                number = int(entry["number"])
                node_type = entry.get("type", "paragraph")
                sections.append(SourceSection(number, entry.get("html", ""), node_type))
                target_sections[number] = cls._target_content(entry.get("target"), saved_units.get(number), node_type)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SessionError(f"Malformed session section data: {e}") from e

        progress = data.get("progress")
        return cls(
            source_language=str(data["source_language"]),
            target_language=str(data["target_language"]),
            sections=sections,
            target_sections=target_sections,
            saved_units=saved_units,
            progress=TranslationProgress.from_dict(progress) if progress else None,
            title=str(data.get("title", "")),
        )

    @staticmethod
    def _target_content(
        target: Optional[Dict[str, Any]],
        unit: Optional[SavedTranslationUnit],
        node_type: str,
    ) -> SectionContent:
        # Explicit live content wins over what the saved unit implies
        if target:
            return SectionContent(
                html=target.get("html", ""),
                origin=ContentSource.from_identifier(target.get("origin")),
                node_type=node_type,
            )

        saved = None
        if unit is not None:
            saved = unit.user or unit.mt
        if saved is None:
            return SectionContent(html="", is_placeholder=True, node_type=node_type)

        origin = (unit.mt.engine if unit.mt else None) or saved.engine
        return SectionContent(
            html=saved.content,
            origin=ContentSource.from_identifier(origin),
            node_type=node_type,
        )

    def build_editor(self) -> InMemoryEditor:
        """Create an editor holding the live target content."""
        return InMemoryEditor(self.target_sections)
