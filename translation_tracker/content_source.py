"""Switching the content source of target sections."""

import logging
from typing import Dict, Optional, Tuple

from .exceptions import MTProviderError
from .interfaces import MTProvider, StructuredEditor
from .models import ContentSource

log = logging.getLogger(__name__)

MT_FAILURE_MESSAGE = "Automatic translation failed!"


class ContentSourceManager:
    """Fills target sections from MT providers or from the source section.

    Keeps the content produced by each provider per section, so switching
    back to a provider reuses it instead of translating again.
    """

    def __init__(
        self,
        editor: StructuredEditor,
        mt_provider: MTProvider,
        preferred_provider: str,
    ):
        """Initialize manager.

        Args:
            editor: Structured editor receiving the content
            mt_provider: Machine translation service
            preferred_provider: Provider used for new translations
        """
        self.editor = editor
        self.mt_provider = mt_provider
        self.preferred_provider = ContentSource.provider(preferred_provider)
        self.default_non_mt_provider = ContentSource.copied_from_source()
        self.content_cache: Dict[Tuple[int, ContentSource], str] = {}

    async def translate_section(self, source_html: str, provider: ContentSource) -> str:
        """Produce content for a section with the given provider.

        Raises:
            MTProviderError: If the provider fails
        """
        if provider.is_copied_from_source:
            return source_html
        if provider.is_untranslated:
            return ""

        try:
            return await self.mt_provider.translate(source_html, provider.provider_id)
        except MTProviderError:
            raise
        except Exception as e:
            raise MTProviderError(f"Translation with {provider} failed: {e}", str(provider)) from e

    async def change_content_source(
        self,
        section_number: int,
        source_html: str,
        previous_provider: Optional[ContentSource],
        new_provider: ContentSource,
        no_cache: bool = False,
    ) -> str:
        """Replace the content of a target section with another provider's version.

        Args:
            section_number: Target section number
            source_html: Source section HTML
            previous_provider: Provider of the current content (cached if given)
            new_provider: Provider to switch to
            no_cache: Do not reuse a cached version

        Returns:
            The new section HTML

        Raises:
            MTProviderError: If the new provider fails
        """
        if previous_provider is not None:
            current = self.editor.get_section_content(section_number)
            if current is not None and not current.is_placeholder:
                self.content_cache[(section_number, previous_provider)] = current.html

        cached = None if no_cache else self.content_cache.get((section_number, new_provider))
        if cached:
            log.debug("Using cached %s content for section %s", new_provider, section_number)
            html = cached
        else:
            html = await self.translate_section(source_html, new_provider)

        self.editor.set_section_content(section_number, html, new_provider)
        return html

    async def translate_placeholder(self, section_number: int, source_html: str) -> ContentSource:
        """Fill an untranslated section with the preferred provider.

        Falls back to copying the source when the provider fails, so the
        translator can still continue by hand.

        Returns:
            Provider that produced the content
        """
        try:
            await self.change_content_source(section_number, source_html, None, self.preferred_provider)
            return self.preferred_provider
        except MTProviderError as e:
            log.warning("MT failed for section %s: %s", section_number, e)
            self.editor.notify(MT_FAILURE_MESSAGE)

        await self.change_content_source(section_number, source_html, None, self.default_non_mt_provider)
        return self.default_non_mt_provider
