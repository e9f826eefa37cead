"""Translation progress calculation.

All functions are pure apart from ``update_section_progress``, which writes
the derived fields of a section state.
"""

from typing import Iterable, List

from .models import SectionState, TranslationProgress
from .tokenizer import tokenize


def section_progress(source: str, current: str, language: str) -> float:
    """Calculate section translation progress from relative token counts.

    If the source has 10 tokens and the translation 10, the progress is 1.0;
    with 5 more tokens added it is 1.5. Values above 1 are not clamped.

    Args:
        source: Source text
        current: Current translation text
        language: Language used for tokenization

    Returns:
        Progress ratio (>= 0)
    """
    if source == current:
        return 1.0
    if not source or not current:
        return 0.0

    source_tokens = tokenize(source, language)
    if not source_tokens:
        return 0.0

    return len(tokenize(current, language)) / len(source_tokens)


def unmodified_ratio(reference: str, current: str, language: str) -> float:
    """Estimate how much of ``current`` is an unmodified version of ``reference``.

    Coarse bag-of-tokens overlap: the larger token list is the reference set,
    the tokens of the smaller list that occur anywhere in it are counted and
    divided by the size of the larger list. Word order is ignored.

    Args:
        reference: Baseline text (unmodified MT or copied source)
        current: Current text
        language: Language used for tokenization

    Returns:
        A value between 0 and 1
    """
    if not reference or not current:
        return 0.0
    if reference == current:
        return 1.0

    big_set = tokenize(reference, language)
    small_set = tokenize(current, language)
    if _is_larger(small_set, big_set):
        big_set, small_set = small_set, big_set

    if not big_set:
        return 0.0

    big_members = set(big_set)
    unmodified_tokens = sum(1 for token in small_set if token in big_members)
    return unmodified_tokens / len(big_set)


def _is_larger(tokens1: List[str], tokens2: List[str]) -> bool:
    # Equal sizes are ordered by content so swapping arguments gives the same roles
    if len(tokens1) != len(tokens2):
        return len(tokens1) > len(tokens2)
    return sorted(tokens1) > sorted(tokens2)


def update_section_progress(state: SectionState, language: str) -> SectionState:
    """Recalculate the derived progress fields of a section state.

    Args:
        state: Section state to update
        language: Target language code

    Returns:
        The same state, updated
    """
    state.unmodified_percentage = unmodified_ratio(
        state.unmodified_mt.text,
        state.user_text,
        language,
    )
    state.translation_progress = section_progress(
        state.source.text,
        state.user_text,
        language,
    )
    return state


def translation_progress(sections: Iterable[SectionState], language: str) -> TranslationProgress:
    """Calculate aggregate progress for all sections.

    Weights are relative to the total number of source sections:
    ``any`` counts sections with any content, ``mt`` sections whose content is
    the unmodified baseline, ``human`` sections edited on top of it.

    Args:
        sections: All section states of the translation
        language: Target language code

    Returns:
        TranslationProgress (all zeros when there are no sections)
    """
    sections = list(sections)
    total = len(sections)
    if total == 0:
        return TranslationProgress()

    with_any = 0
    with_user = 0
    with_unmodified = 0

    for state in sections:
        # Make sure we are not using old data
        update_section_progress(state, language)

        if not state.user_text:
            # Blanked or never translated
            continue

        with_any += 1
        if not state.is_modified():
            with_unmodified += 1
        else:
            with_user += 1

    return TranslationProgress(
        any=with_any / total,
        human=with_user / total,
        mt=with_unmodified / total,
        mt_sections_count=with_unmodified,
        translated_sections_count=with_unmodified + with_user,
    )


def unmodified_mt_percentage(sections: Iterable[SectionState], language: str) -> float:
    """Percentage of user translation tokens that also occur in the section baseline.

    Args:
        sections: Section states to include
        language: Target language code

    Returns:
        Percentage between 0 and 100 (0 when there is no user translation)
    """
    unmodified_tokens = 0
    total_tokens = 0

    for state in sections:
        baseline_tokens = set(tokenize(state.unmodified_mt.text, language))
        user_tokens = tokenize(state.user_text, language)

        total_tokens += len(user_tokens)
        unmodified_tokens += sum(1 for token in user_tokens if token in baseline_tokens)

    if total_tokens == 0:
        return 0.0

    return unmodified_tokens / total_tokens * 100
