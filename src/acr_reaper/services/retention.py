"""Selection of which tags survive a reaping run."""

from ..config import KeepPolicy
from ..models.plan import RetentionPlan
from ..models.tag import LATEST_TAG, CategorizedTags


def _first(tags: list[str], keep_count: int) -> list[str]:
    # Categorized tags are already newest first
    if keep_count < 0:
        return list(tags)
    return tags[:keep_count]


def plan_retention(
    categorized: CategorizedTags, policy: KeepPolicy
) -> RetentionPlan:
    """Use a KeepPolicy to split tags into keepers and victims.

    Parameters
    ----------
    categorized
        Output of the tag classifier.
    policy
        How many tags of each category to keep.

    Returns
    -------
    RetentionPlan
        Keep and delete lists, each in the original tag order.

    Notes
    -----
    Selection is purely positional: the first N tags of a category, in the
    order the registry returned them, are kept.  A tag selected by more
    than one category is kept once.  ``latest`` is always kept.
    """
    keepers: set[str] = set()
    if categorized.latest:
        keepers.add(LATEST_TAG)
    keepers.update(_first(categorized.semver, policy.semver))
    keepers.update(_first(categorized.alphanumeric, policy.alphanumeric))
    return RetentionPlan(
        keep=[x for x in categorized.tags if x in keepers],
        delete=[x for x in categorized.tags if x not in keepers],
    )
