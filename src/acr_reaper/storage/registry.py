"""Abstract superclass for container registry clients."""

import json
import logging
from abc import abstractmethod
from pathlib import Path

import structlog

from ..config import RegistryAuth, RegistryConfig
from ..models.registry_category import RegistryCategory
from ..models.tag import CategorizedTags, categorize_tags, dedupe_tags


class ContainerRegistryClient:
    """Collection of methods we expect any registry client to provide.

    The interface is deliberately narrow: list the tags of one repository,
    newest first, and delete one tag.  Everything else (classification,
    deciding what to keep) happens on the tag list and never touches the
    registry.

    Note that these are synchronous.  Deletions are issued one at a time,
    in order, and a repository holds at most a few hundred tags, so there
    is nothing to gain from parallelism.  Registries rate-limit anyway.

    Neither ``list_tags()`` nor ``delete_tag()`` raises for registry-side
    failures.  A listing that fails is treated as an empty repository, and
    a deletion that fails returns ``False``.
    """

    @abstractmethod
    def authenticate(self, auth: RegistryAuth) -> None: ...

    @abstractmethod
    def list_tags(self) -> list[str]:
        """Return tags for the repository, newest first."""
        ...

    @abstractmethod
    def delete_tag(self, tag: str) -> bool:
        """Delete a single tag; return whether the registry says it worked."""
        ...

    def __init__(self, cfg: RegistryConfig) -> None:
        # Subclasses do their own category checking before they call
        # _extract_registry_config(), so they do not use super().__init__().
        self._extract_registry_config(cfg)

    def _extract_registry_config(self, cfg: RegistryConfig) -> None:
        # Load the generic items from the registry config

        # Establish debugging and dry-run first.
        self._debug = cfg.debug
        self._dry_run = cfg.dry_run

        log_level = logging.DEBUG if self._debug else logging.INFO
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(log_level)
        )
        # Set up logging
        self._logger = structlog.get_logger(__name__)
        self._logger.debug("Initialized logging")

        # Common fields
        self._registry = cfg.registry
        self._repository = cfg.repository
        self._category = cfg.category
        self.name = f"{self._registry}/{self._repository}"

        # Initialize empty tag list
        self._tags: list[str] = []
        self.categorized_tags = CategorizedTags()

        # Load inputs if supplied
        if cfg.input_file:
            self.debug_load_tags(cfg.input_file)

    @property
    def tags(self) -> list[str]:
        return list(self._tags)

    def scan_repo(self) -> None:
        """Ask the registry for its tags and remember them."""
        self._tags = dedupe_tags(self.list_tags())
        self._logger.debug(f"Found {len(self._tags)} tags in {self.name}")

    def categorize(self) -> None:
        """Run tags through the classifier."""
        self.categorized_tags = categorize_tags(self._tags)

    def debug_dump_tags(self, outputfile: Path) -> None:
        """Write JSON of tag list."""
        dd: dict[str, dict[str, str] | list[str]] = {
            "metadata": {"category": self._category.value},
            "data": self._tags,
        }
        outputfile.write_text(json.dumps(dd, indent=2))

    def debug_load_tags(self, inputfile: Path) -> None:
        """Read tag list from JSON."""
        inp = json.loads(inputfile.read_text())
        if inp["metadata"]["category"] != self._category.value:
            raise ValueError(
                f"Dump is from {inp['metadata']['category']}, "
                f"not {self._category.value}"
            )
        jsons = inp["data"] or []
        if not isinstance(jsons, list):
            raise TypeError(f"'data' field of {inputfile} must be a list")
        self._tags = dedupe_tags(str(x) for x in jsons)
        count = len(self._tags)
        self._logger.debug(f"Ingested {count} tag{ 's' if count!=1 else ''}")

    def _check_category(
        self, cfg: RegistryConfig, expected: RegistryCategory
    ) -> None:
        if cfg.category != expected:
            raise ValueError(
                f"{type(self).__name__} must have category value "
                f"'{expected.value}', not '{cfg.category.value}'"
            )
