"""Translation Progress Tracker.

Per-section translation progress, MT abuse detection and source/target
section alignment for human-reviewed machine translation of articles.
"""

from .alignment import SectionAligner
from .config import TrackerConfig, load_config
from .models import ContentSource, SectionState, TranslationProgress
from .tracker import TranslationTracker

__version__ = "0.1.0"
__all__ = [
    "ContentSource",
    "SectionAligner",
    "SectionState",
    "TrackerConfig",
    "TranslationProgress",
    "TranslationTracker",
    "load_config",
]
