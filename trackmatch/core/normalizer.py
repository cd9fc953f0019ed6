"""Text normalization for title/artist comparison keys.

The output of these functions is only ever used as a comparison key; it is
never shown to users.
"""

from __future__ import annotations

import re
import unicodedata

from trackmatch.utils.constants import DEFINITE_ARTICLE_PREFIX

# Scheme-less URL junk such as "www.djsoundtop.com"
URL_RE = re.compile(r"\bwww\.\S+", re.IGNORECASE)

# Trailing featured-artist clause; the whole clause goes, not just the keyword
_FEAT_RE = re.compile(r"\s+(?:feat\.?|ft\.?|featuring)\s+.*$", re.IGNORECASE)

# Stray BPM annotation at the end, e.g. "Song Title 131"
_TRAILING_BPM_RE = re.compile(r"\s+\d{2,3}\s*$")

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_diacritics(value: str) -> str:
    """Remove combining marks: 'Beyoncé' -> 'Beyonce'."""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def strip_urls(value: str) -> str:
    return URL_RE.sub("", value)


def _normalize_once(value: str) -> str:
    # URL and feat-clause removal must run before punctuation stripping,
    # otherwise they merge into unremovable word characters.
    s = unicodedata.normalize("NFKC", value)
    s = strip_diacritics(s)
    s = s.lower()
    s = strip_urls(s)
    s = _FEAT_RE.sub("", s)
    s = _TRAILING_BPM_RE.sub("", s)
    s = _PUNCTUATION_RE.sub("", s)
    return _WHITESPACE_RE.sub(" ", s).strip()


def normalize(value: str | None) -> str:
    """Canonicalize a raw title or artist string into a comparison key.

    Pipeline: NFKC, diacritic removal, lowercase, URL removal, trailing
    feat/ft/featuring clause removal, trailing 2-3 digit number removal,
    punctuation removal, whitespace collapsing.

    A single pass can expose more removable text (``"Song (feat. X)"`` only
    turns into ``"song feat x"`` once the parentheses are gone), so the pass
    is repeated until the output is stable. This keeps
    ``normalize(normalize(s)) == normalize(s)``.

    Args:
        value: Raw string, possibly None.

    Returns:
        Normalized key; empty string for absent or empty input.
    """
    if not value:
        return ""

    previous = None
    current = value
    while current != previous:
        previous = current
        current = _normalize_once(current)
    return current


def normalize_artist(value: str | None) -> str:
    """Normalize an artist name and drop a leading 'the '.

    'The Weeknd' and 'Weeknd' produce the same key.
    """
    normalized = normalize(value)
    if normalized.startswith(DEFINITE_ARTICLE_PREFIX):
        normalized = normalized[len(DEFINITE_ARTICLE_PREFIX):]
    return normalized
