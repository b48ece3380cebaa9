"""
Text shaping helpers shared by the finding mappers
"""

import re
from typing import Optional

FULL_TEXT_LOCATION = "[SEE FULL TEXT IN AssumeRolePolicyDocument]"

# Security Hub renders "/" inside Types as a path separator
SLASH_SUBSTITUTE = "∕"

_MULTI_SPACE = re.compile(r"  +")
_NEWLINE = re.compile(r"\r?\n|\r")
_NON_WORD = re.compile(r"\W", re.ASCII)
_NON_ALNUM_SPACE = re.compile(r"[^0-9a-zA-Z ]")


def clean_text(text: Optional[str]) -> str:
    """Collapse repeated spaces and replace line breaks"""
    if not text:
        return ""
    return _NEWLINE.sub(" ", _MULTI_SPACE.sub(" ", text))


def truncate(text: str, length: int, omission: str = "") -> str:
    """Cut ``text`` to ``length`` characters, ending with ``omission`` if cut"""
    if len(text) <= length:
        return text
    end = length - len(omission)
    if end < 1:
        return omission[:length]
    return text[:end] + omission


def replace_slashes(text: str) -> str:
    return text.replace("/", SLASH_SUBSTITUTE)


def strip_non_word(text: str) -> str:
    return _NON_WORD.sub("", text)


def strip_to_alnum(text: str) -> str:
    return _NON_ALNUM_SPACE.sub("", text)


def format_impact(impact: float) -> str:
    """Render an impact the way it appears in the source document"""
    if float(impact).is_integer():
        return str(int(impact))
    return repr(float(impact))
