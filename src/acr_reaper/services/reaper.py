"""Provides reaping services for a Container Registry configuration."""

import logging
import os
from pathlib import Path

import structlog
from pydantic import SecretStr

from ..config import RegistryAuth, RegistryConfig
from ..models.plan import ReapResult, RetentionPlan
from ..models.registry_category import RegistryCategory
from ..models.tag import LATEST_TAG, CategorizedTags
from ..storage.acr import ACRClient
from ..storage.azcli import AzureCLIClient
from ..storage.registry import ContainerRegistryClient
from .retention import plan_retention


class Reaper:
    """Provides the mechanism to implement a tag retention policy.

    Parameters
    ----------
    cfg
        Configuration for the repository to reap.
    storage
        Registry client to use.  If not supplied, one is built from the
        configured category.
    """

    def __init__(
        self,
        cfg: RegistryConfig,
        storage: ContainerRegistryClient | None = None,
    ) -> None:
        # Establish debugging and dry-run first.
        self._debug = cfg.debug
        self._dry_run = cfg.dry_run

        log_level = logging.DEBUG if self._debug else logging.INFO
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(log_level)
        )
        self._category = cfg.category
        self._auth = cfg.auth.model_copy() if cfg.auth else RegistryAuth()
        if storage is None:
            match self._category:
                case RegistryCategory.AZ_CLI:
                    storage = AzureCLIClient(cfg=cfg)
                case RegistryCategory.ACR:
                    if self._auth.username is None:
                        self._auth.username = os.getenv("ACR_USERNAME")
                    if self._auth.password is None:
                        self._auth.password = SecretStr(
                            os.getenv("ACR_PASSWORD", "")
                        )
                    storage = ACRClient(cfg=cfg)
                case _:
                    raise NotImplementedError(
                        f"Storage driver for {self._category} not "
                        "implemented yet"
                    )
        self._storage = storage
        self._keep_policy = cfg.keep
        self._input_file = cfg.input_file
        self._categorized = CategorizedTags()
        self._plan: RetentionPlan | None = None
        self.name = self._storage.name
        # Set up logging
        self._logger = structlog.get_logger(f"reaper-{self.name}")
        self._logger.debug(f"Initialized logging for reaper {self.name}")

    @property
    def categorized(self) -> CategorizedTags:
        return self._categorized

    def populate(self) -> None:
        if not self._input_file:
            # We don't have preloaded data, so run a repo scan.
            self._storage.authenticate(self._auth)
            self._storage.scan_repo()
        self._storage.categorize()
        self._categorized = self._storage.categorized_tags
        self._logger.debug(
            "Categorized tags", **self._categorized.tag_counts()
        )

    def dump(self, outputfile: Path) -> None:
        """Write the scanned tag list, for later use as an input file."""
        self._storage.debug_dump_tags(outputfile)
        self._logger.info(f"Wrote tag list for {self.name} to {outputfile}")

    def plan(self) -> RetentionPlan:
        """Use the KeepPolicy to plan a set of tags to delete."""
        self._plan = plan_retention(self._categorized, self._keep_policy)
        return self._plan

    def _print_plan(self, plan: RetentionPlan) -> None:
        cat = self._categorized
        if not cat.tags:
            print("No tags found in repository")
            return
        print(f"Found {len(cat.tags)} tags in {self.name}")
        keepers = set(plan.keep)
        if cat.latest:
            print(f"Keeping tag: {LATEST_TAG}")
        if cat.semver:
            print(f"Found {len(cat.semver)} semantic version tags")
            for tag in cat.semver:
                if tag in keepers:
                    print(f"Keeping semantic version tag: {tag}")
        if cat.alphanumeric:
            print(f"Found {len(cat.alphanumeric)} alphanumeric tags")
            for tag in cat.alphanumeric:
                if tag in keepers:
                    print(f"Keeping alphanumeric tag: {tag}")
        print(f"Tags to keep: {len(plan.keep)}")
        if not plan.delete:
            print("No tags to delete")
            return
        print(f"Tags to delete: {len(plan.delete)}")

    def report(self) -> None:
        """Report on tags which would be deleted by plan execution."""
        if self._plan is None:
            self._logger.warning(
                "No plan has been formulated and thus cannot be reported."
            )
            return
        self._print_plan(self._plan)
        if not self._plan.delete:
            return
        print("Would delete:")
        for tag in self._plan.delete:
            print(f"  - {tag}")

    def reap(self) -> ReapResult:
        """Delete every tag in the plan, one at a time.

        A failed deletion is logged and counted, and the remaining tags are
        still attempted.  In dry-run mode this only reports.
        """
        if self._plan is None:
            self._logger.warning(
                "No plan has been formulated and thus cannot be executed."
            )
            return ReapResult(dry_run=self._dry_run)
        plan = self._plan
        result = ReapResult(kept=len(plan.keep), dry_run=self._dry_run)
        if self._dry_run:
            self.report()
            return result
        self._print_plan(plan)
        if not plan.delete:
            return result
        print("Deleting tags...")
        for tag in plan.delete:
            if self._storage.delete_tag(tag):
                result.deleted.append(tag)
                self._logger.info(f"Deleted: {tag}")
            else:
                result.failed.append(tag)
                self._logger.error(f"Failed to delete: {tag}")
        self._plan = None
        return result
