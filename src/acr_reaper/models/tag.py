"""Classification of image tags into retention categories."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

LATEST_TAG = "latest"
"""Implicit tag used by Docker when no tag is specified.  Never reaped."""

# 1.2.3 or 1.2.3.4
SEMVER_REGEX = re.compile(r"\d+\.\d+\.\d+(\.\d+)?", re.ASCII)
# 1157bb, a1b2c3, and anything longer.  Historically described as
# "6-character" tags, but the pattern has always accepted six or more.
ALPHANUMERIC_REGEX = re.compile(r"[0-9a-zA-Z]{6,}", re.ASCII)

__all__ = [
    "ALPHANUMERIC_REGEX",
    "LATEST_TAG",
    "SEMVER_REGEX",
    "CategorizedTags",
    "TagCategory",
    "categorize_tag",
    "categorize_tags",
    "dedupe_tags",
]


class TagCategory(Enum):
    """The retention category a tag falls into."""

    LATEST = "latest"
    SEMVER = "semver"
    ALPHANUMERIC = "alphanumeric"
    OTHER = "other"


def categorize_tag(tag: str) -> set[TagCategory]:
    """Return every category a tag matches.

    Parameters
    ----------
    tag
        Tag name, exactly as the registry reports it.

    Returns
    -------
    set of TagCategory
        Matching categories, or ``{TagCategory.OTHER}`` if none match.

    Notes
    -----
    Matches are full-string and case-sensitive; no normalization is done.
    The shipped patterns cannot both match the same tag (semantic versions
    contain dots), but nothing here relies on that.
    """
    retval: set[TagCategory] = set()
    if tag == LATEST_TAG:
        retval.add(TagCategory.LATEST)
    if SEMVER_REGEX.fullmatch(tag):
        retval.add(TagCategory.SEMVER)
    if tag != LATEST_TAG and ALPHANUMERIC_REGEX.fullmatch(tag):
        retval.add(TagCategory.ALPHANUMERIC)
    if not retval:
        retval.add(TagCategory.OTHER)
    return retval


def dedupe_tags(tags: Iterable[str]) -> list[str]:
    """Drop repeated tags, keeping the first occurrence of each."""
    return list(dict.fromkeys(tags))


@dataclass
class CategorizedTags:
    """Tags split into ordered per-category subsequences.

    Each subsequence keeps the relative order of ``tags``, which is
    newest-first as delivered by the registry.
    """

    tags: list[str] = field(default_factory=list)
    latest: bool = False
    semver: list[str] = field(default_factory=list)
    alphanumeric: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def tag_counts(self) -> dict[str, int]:
        return {
            "total": len(self.tags),
            "latest": 1 if self.latest else 0,
            "semver": len(self.semver),
            "alphanumeric": len(self.alphanumeric),
            "other": len(self.other),
        }


def categorize_tags(tags: Iterable[str]) -> CategorizedTags:
    """Run tags through the classifier, preserving order."""
    retval = CategorizedTags(tags=dedupe_tags(tags))
    for tag in retval.tags:
        categories = categorize_tag(tag)
        if TagCategory.LATEST in categories:
            retval.latest = True
        if TagCategory.SEMVER in categories:
            retval.semver.append(tag)
        if TagCategory.ALPHANUMERIC in categories:
            retval.alphanumeric.append(tag)
        if TagCategory.OTHER in categories:
            retval.other.append(tag)
    return retval
