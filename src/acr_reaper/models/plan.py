"""Models for the outcome of planning and executing a reaping run."""

from dataclasses import dataclass, field


@dataclass
class RetentionPlan:
    """Partition of a repository's tags into those to keep and those to
    delete.  Both lists are in the registry's original (newest-first) order.
    """

    keep: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)


@dataclass
class ReapResult:
    """What happened when a plan was executed."""

    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    kept: int = 0
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return not self.failed
