"""Exceptions raised by the translation tracker."""


class TranslationTrackerError(Exception):
    """Base class for translation tracker errors."""


class ConfigError(TranslationTrackerError):
    """Configuration file could not be loaded or is invalid."""


class MTProviderError(TranslationTrackerError):
    """Machine translation provider failed or is unknown."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class SessionError(TranslationTrackerError):
    """Translation session snapshot is malformed."""


class UnknownSectionError(TranslationTrackerError, KeyError):
    """Section number was never part of the decomposed source document."""

    def __init__(self, section_number: int):
        super().__init__(f"Unknown section: {section_number}")
        self.section_number = section_number

    def __str__(self) -> str:
        return self.args[0]


class SchedulerError(TranslationTrackerError):
    """Delayed work was requested without a running event loop."""
