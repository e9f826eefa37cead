"""Script-aware tokenization used for progress and MT abuse heuristics."""

import re
from typing import List

# Scripts without whitespace word boundaries
CJK_SCRIPTS = frozenset([
    "Bopo", "Hang", "Hani", "Hans", "Hant", "Hira", "Jpan", "Kana", "Kore", "Yiii",
])

# Default script per language code. Languages absent here use Latin-like
# word tokenization.
LANGUAGE_SCRIPTS = {
    "zh": "Hans",
    "zh-hans": "Hans",
    "zh-cn": "Hans",
    "zh-sg": "Hans",
    "zh-my": "Hans",
    "zh-hant": "Hant",
    "zh-tw": "Hant",
    "zh-hk": "Hant",
    "zh-mo": "Hant",
    "zh-yue": "Hant",
    "zh-classical": "Hant",
    "zh-min-nan": "Latn",
    "yue": "Hant",
    "lzh": "Hant",
    "gan": "Hant",
    "gan-hans": "Hans",
    "gan-hant": "Hant",
    "wuu": "Hans",
    "hak": "Latn",
    "cdo": "Latn",
    "ja": "Jpan",
    "ko": "Kore",
    "ko-kp": "Kore",
    "ii": "Yiii",
}

TOKEN_PATTERN = re.compile(r"\S+")


def get_script(language: str) -> str:
    """Resolve the script code for a language code.

    Explicit script subtags (``sr-Latn``) win over the language default.
    """
    if not language:
        return "Latn"

    code = language.strip().lower().replace("_", "-")
    if code in LANGUAGE_SCRIPTS:
        return LANGUAGE_SCRIPTS[code]

    for subtag in code.split("-")[1:]:
        if len(subtag) == 4 and subtag.isalpha():
            return subtag.capitalize()

    return LANGUAGE_SCRIPTS.get(code.split("-")[0], "Latn")


def is_cjk_language(language: str) -> bool:
    """Check if the language is written in a CJK script."""
    return get_script(language) in CJK_SCRIPTS


def tokenize(text: str, language: str) -> List[str]:
    """Split text into comparable tokens.

    Words for whitespace-delimited scripts, single codepoints for CJK.

    Args:
        text: Text to tokenize
        language: Language code of the text

    Returns:
        List of tokens (empty for empty input)
    """
    if not text or text.isspace():
        return []

    if is_cjk_language(language):
        return list(text)

    return TOKEN_PATTERN.findall(text)


def count_tokens(text: str, language: str) -> int:
    """Count tokens in text."""
    return len(tokenize(text, language))
