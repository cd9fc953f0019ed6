"""Split a title into its core and its version/mix descriptor.

"Song (Extended Mix)" and "Song - Radio Edit" both have the core "Song".
Descriptors are recognized by a keyword vocabulary inside bracket groups or
after a trailing " - " separator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from trackmatch.core.normalizer import normalize, strip_urls
from trackmatch.utils.constants import VERSION_KEYWORDS

_KEYWORD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in VERSION_KEYWORDS) + r")(?:es|ed|s|d)?\b",
    re.IGNORECASE,
)

# Trailing (...) or [...] group
_BRACKET_GROUP_RE = re.compile(r"\s*[\(\[]([^\(\)\[\]]*)[\)\]]\s*$")

# Trailing " - Descriptor" (hyphen, en dash or em dash)
_DASH_SUFFIX_RE = re.compile(r"\s+[-–—]\s+([^-–—]+)$")

_TRAILING_MIX_RE = (
    re.compile(r"\s+original\s+mix\s*$", re.IGNORECASE),
    re.compile(r"\s+extended\s+mix\s*$", re.IGNORECASE),
)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class VersionInfo:
    """Result of splitting a title.

    Attributes:
        core: Title with version descriptors removed (not normalized).
        version: Removed descriptors joined with ' / ', or None.
    """

    core: str
    version: str | None = None

    @property
    def has_version(self) -> bool:
        return self.version is not None


def has_version_keyword(text: str) -> bool:
    return _KEYWORD_RE.search(text) is not None


def extract_version_info(title: str | None) -> VersionInfo:
    """Split a raw title into core and version descriptor.

    Trailing bracket groups and trailing dash descriptors that contain a
    version keyword are peeled off the end one at a time, until the title
    ends in something else. Groups in the middle of a title are kept. If
    nothing would be left of the title, it is returned unchanged.

    Args:
        title: Raw title.

    Returns:
        VersionInfo with the core and the removed descriptors.
    """
    if not title:
        return VersionInfo(core="")

    descriptors: list[str] = []
    core = title.strip()

    while core:
        for pattern in (_BRACKET_GROUP_RE, _DASH_SUFFIX_RE):
            match = pattern.search(core)
            if match and has_version_keyword(match.group(1)):
                # Peeled right to left; keep descriptors in title order
                descriptors.insert(0, match.group(1).strip())
                core = core[: match.start()].rstrip()
                break
        else:
            break

    core = _WHITESPACE_RE.sub(" ", core).strip()
    if not core or not descriptors:
        return VersionInfo(core=title.strip())
    return VersionInfo(core=core, version=" / ".join(descriptors))


def extract_core_title(title: str | None) -> str:
    """Return the normalized core title (version/mix info removed).

    URL junk is removed first so it cannot pollute keyword detection. A
    trailing unbracketed 'original mix' or 'extended mix' is removed after
    extraction.

    Args:
        title: Raw title.

    Returns:
        Normalized core title; empty string for absent input.
    """
    if not title:
        return ""
    cleaned = strip_urls(title).strip()
    core = extract_version_info(cleaned).core
    for pattern in _TRAILING_MIX_RE:
        core = pattern.sub("", core)
    return normalize(core.strip())
