"""Data models for the translation tracker."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from bs4 import BeautifulSoup


class ContentSourceKind(Enum):
    """Where the content of a target section came from."""
    PROVIDER = "provider"  # Named machine translation engine
    SOURCE = "source"  # Copied verbatim from the source section
    UNTRANSLATED = "untranslated"


@dataclass(frozen=True)
class ContentSource:
    """Tagged content source of a section.

    Persisted and editor-facing identifiers are plain strings: a provider id,
    the literal ``"source"``, or ``None`` for untouched sections.
    """
    kind: ContentSourceKind
    provider_id: Optional[str] = None

    SOURCE_IDENTIFIER: ClassVar[str] = "source"

    @classmethod
    def provider(cls, provider_id: str) -> "ContentSource":
        """Content produced by a named MT engine."""
        if not provider_id:
            raise ValueError("Provider id must not be empty")
        if provider_id == cls.SOURCE_IDENTIFIER:
            return cls.copied_from_source()
        return cls(ContentSourceKind.PROVIDER, provider_id)

    @classmethod
    def copied_from_source(cls) -> "ContentSource":
        return cls(ContentSourceKind.SOURCE)

    @classmethod
    def untranslated(cls) -> "ContentSource":
        return cls(ContentSourceKind.UNTRANSLATED)

    @classmethod
    def from_identifier(cls, identifier: Optional[str]) -> "ContentSource":
        """Parse a persisted/editor identifier."""
        if not identifier:
            return cls.untranslated()
        return cls.provider(identifier)

    @property
    def identifier(self) -> Optional[str]:
        if self.kind is ContentSourceKind.PROVIDER:
            return self.provider_id
        if self.kind is ContentSourceKind.SOURCE:
            return self.SOURCE_IDENTIFIER
        return None

    @property
    def is_untranslated(self) -> bool:
        return self.kind is ContentSourceKind.UNTRANSLATED

    @property
    def is_copied_from_source(self) -> bool:
        return self.kind is ContentSourceKind.SOURCE

    def __str__(self) -> str:
        return self.identifier or "untranslated"


@dataclass(frozen=True)
class Content:
    """HTML content of a section together with its plain text."""
    html: str = ""
    text: str = ""

    @classmethod
    def from_html(cls, html: Optional[str]) -> "Content":
        """Build content from HTML, extracting the text."""
        if not html:
            return cls()
        text = BeautifulSoup(html, "html.parser").get_text()
        return cls(html=html, text=text)

    @property
    def is_empty(self) -> bool:
        return not self.html and not self.text


@dataclass
class SourceSection:
    """A section of the decomposed source document."""
    section_number: int
    html: str
    node_type: str = "paragraph"


@dataclass
class SectionContent:
    """Live content of a target section as reported by the editor."""
    html: str
    origin: ContentSource = field(default_factory=ContentSource.untranslated)
    is_placeholder: bool = False
    node_type: str = "paragraph"


@dataclass
class SavedContent:
    """One persisted translation variant of a section."""
    engine: Optional[str]
    content: str


@dataclass
class SavedTranslationUnit:
    """Persisted translation of a section: the user version and the unmodified MT."""
    user: Optional[SavedContent] = None
    mt: Optional[SavedContent] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedTranslationUnit":
        def variant(key: str) -> Optional[SavedContent]:
            value = data.get(key)
            if not value:
                return None
            return SavedContent(engine=value.get("engine"), content=value.get("content") or "")

        return cls(user=variant("user"), mt=variant("mt"))


@dataclass
class Issue:
    """Translation issue reported on a section."""
    name: str
    message: str
    severity: str = "warning"
    resolvable: bool = True
    title: str = ""
    help: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "message": self.message,
            "severity": self.severity,
            "resolvable": self.resolvable,
            "title": self.title,
            "help": self.help,
        }


@dataclass
class SectionState:
    """Translation state of a single source section.

    Derived fields (``unmodified_percentage``, ``translation_progress``) are
    written by the progress calculator and must be refreshed after any
    content mutation before they are read.
    """
    section_number: int
    source: Content = field(default_factory=Content)
    unmodified_mt: Content = field(default_factory=Content)
    user_translation: Optional[Content] = None
    current_provider: ContentSource = field(default_factory=ContentSource.untranslated)
    unmodified_percentage: float = 0.0
    translation_progress: float = 0.0
    unmodified_mt_saved: bool = False
    mt_abuse_warning: bool = False

    def set_source(self, html: str):
        """Set the source content. Allowed once."""
        if not self.source.is_empty:
            raise ValueError(f"Source of section {self.section_number} is already set")
        self.source = Content.from_html(html)

    def set_current_provider(self, provider: ContentSource):
        """Set the content source. A different provider starts a new episode."""
        if provider != self.current_provider:
            self.unmodified_mt = Content()
            self.unmodified_mt_saved = False
        self.current_provider = provider

    def set_unmodified_mt(self, html: Optional[str]):
        self.unmodified_mt = Content.from_html(html)

    def mark_unmodified_mt_saved(self):
        self.unmodified_mt_saved = True

    def set_user_translation(self, html: Optional[str]):
        self.user_translation = None if html is None else Content.from_html(html)

    @property
    def user_html(self) -> str:
        return self.user_translation.html if self.user_translation else ""

    @property
    def user_text(self) -> str:
        return self.user_translation.text if self.user_translation else ""

    def has_baseline(self) -> bool:
        return bool(self.unmodified_mt.html)

    def is_modified(self) -> bool:
        """Whether the user content differs from the unmodified MT."""
        return self.user_html != self.unmodified_mt.html

    def reset(self):
        """Reset to untranslated, keeping the source."""
        self.set_current_provider(ContentSource.untranslated())
        self.set_user_translation("")
        self.unmodified_percentage = 0.0
        self.translation_progress = 0.0


@dataclass
class TranslationProgress:
    """Aggregate translation progress, relative to the number of source sections."""
    any: float = 0.0
    human: float = 0.0
    mt: float = 0.0
    mt_sections_count: int = 0
    translated_sections_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted key names."""
        return {
            "any": self.any,
            "human": self.human,
            "mt": self.mt,
            "mtSectionsCount": self.mt_sections_count,
            "translatedSectionsCount": self.translated_sections_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationProgress":
        return cls(
            any=float(data.get("any", 0)),
            human=float(data.get("human", 0)),
            mt=float(data.get("mt", 0)),
            mt_sections_count=int(data.get("mtSectionsCount", 0)),
            translated_sections_count=int(data.get("translatedSectionsCount", 0)),
        )

    def matches(self, other: "TranslationProgress", tolerance: float = 1e-9) -> bool:
        """Compare with another progress, allowing float rounding."""
        return (
            math.isclose(self.any, other.any, abs_tol=tolerance)
            and math.isclose(self.human, other.human, abs_tol=tolerance)
            and math.isclose(self.mt, other.mt, abs_tol=tolerance)
            and self.mt_sections_count == other.mt_sections_count
            and self.translated_sections_count == other.translated_sections_count
        )
