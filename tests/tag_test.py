"""Tests for tag classification."""

import pytest

from acr_reaper.models.tag import (
    TagCategory,
    categorize_tag,
    categorize_tags,
    dedupe_tags,
)


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("latest", {TagCategory.LATEST}),
        ("1.2.3", {TagCategory.SEMVER}),
        ("10.20.30.40", {TagCategory.SEMVER}),
        ("abcdef", {TagCategory.ALPHANUMERIC}),
        ("1157bb", {TagCategory.ALPHANUMERIC}),
        ("123456", {TagCategory.ALPHANUMERIC}),
        ("d41d8cd98f00b204", {TagCategory.ALPHANUMERIC}),
        ("abc12", {TagCategory.OTHER}),
        ("1.2", {TagCategory.OTHER}),
        ("1.2.3.4.5", {TagCategory.OTHER}),
        ("v1.2.3", {TagCategory.OTHER}),
        ("1.2.3-rc1", {TagCategory.OTHER}),
        ("feature-x", {TagCategory.OTHER}),
        ("Latest", {TagCategory.ALPHANUMERIC}),
        (" latest", {TagCategory.OTHER}),
        ("\u0661.\u0662.\u0663", {TagCategory.OTHER}),
        ("\u0661\u0662\u0663\u0664\u0665\u0666", {TagCategory.OTHER}),
    ],
)
def test_categorize_tag(tag: str, expected: set[TagCategory]) -> None:
    """Test that each tag lands in the right category."""
    assert categorize_tag(tag) == expected


def test_latest_is_not_alphanumeric() -> None:
    """'latest' is six letters, but only counts as latest."""
    cat = categorize_tags(["latest"])
    assert cat.latest
    assert cat.alphanumeric == []


def test_categorize_preserves_order(preloaded_tags: list[str]) -> None:
    """Test that subsequences keep the registry's newest-first order."""
    cat = categorize_tags(preloaded_tags)
    assert cat.semver == [
        "2.0.0",
        "1.9.9",
        "1.9.8",
        "1.9.7",
        "1.9.6",
        "1.9.5",
        "1.9.4.2",
    ]
    assert cat.alphanumeric == [
        "9f3c2ab",
        "1157bb",
        "a1b2c3",
        "d41d8cd98f00",
        "ffee99",
        "0a0b0c",
        "7e7e7e",
    ]
    assert cat.other == ["feature-x", "abc12", "dev", "1.9"]
    assert cat.latest


def test_tag_counts(preloaded_tags: list[str]) -> None:
    """Test whether categorization gets the right item counts."""
    counts = categorize_tags(preloaded_tags).tag_counts()
    assert counts == {
        "total": 19,
        "latest": 1,
        "semver": 7,
        "alphanumeric": 7,
        "other": 4,
    }


def test_dedupe() -> None:
    """Repeated tags keep their first position."""
    assert dedupe_tags(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
    cat = categorize_tags(["1.0.0", "abcdef", "1.0.0"])
    assert cat.tags == ["1.0.0", "abcdef"]
    assert cat.semver == ["1.0.0"]


def test_empty() -> None:
    """No tags, no categories."""
    cat = categorize_tags([])
    assert cat.tags == []
    assert not cat.latest
    assert cat.semver == []
    assert cat.alphanumeric == []
