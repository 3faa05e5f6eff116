"""Storage client that drives the Azure CLI.

Authentication, subscription selection, and everything else about talking
to Azure is left to ``az`` itself; run ``az login`` first.
"""

import json
import subprocess

from ..config import RegistryAuth, RegistryConfig
from ..models.registry_category import RegistryCategory
from .registry import ContainerRegistryClient


class AzureCLIClient(ContainerRegistryClient):
    """Client for Azure Container Registry via ``az acr repository``."""

    def __init__(self, cfg: RegistryConfig, az: str = "az") -> None:
        self._check_category(cfg, RegistryCategory.AZ_CLI)
        self._az = az
        super()._extract_registry_config(cfg)

    def authenticate(self, auth: RegistryAuth) -> None:
        """Nothing to do: ``az`` holds its own credentials."""

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = [self._az, *args]
        self._logger.debug("Running command", command=" ".join(cmd))
        return subprocess.run(
            cmd, capture_output=True, text=True, check=False
        )

    def list_tags(self) -> list[str]:
        try:
            proc = self._run(
                [
                    "acr",
                    "repository",
                    "show-tags",
                    "--name",
                    self._registry,
                    "--repository",
                    self._repository,
                    "--output",
                    "json",
                    "--orderby",
                    "time_desc",
                ]
            )
        except OSError as exc:
            self._logger.warning(
                f"Could not run '{self._az}'; treating as no tags",
                error=str(exc),
            )
            return []
        if proc.returncode != 0:
            self._logger.warning(
                f"Listing tags for {self.name} failed; treating as no tags",
                returncode=proc.returncode,
                stderr=proc.stderr.strip(),
            )
            return []
        output = proc.stdout.strip()
        if not output:
            return []
        try:
            obj = json.loads(output)
        except json.JSONDecodeError as exc:
            self._logger.warning(
                f"Unparseable tag list for {self.name}; treating as no tags",
                error=str(exc),
            )
            return []
        if not obj:
            # Covers both "[]" and "null"
            return []
        if not isinstance(obj, list):
            self._logger.warning(
                f"Tag list for {self.name} is not a list; treating as no tags",
                output=output,
            )
            return []
        return [str(x) for x in obj if x]

    def delete_tag(self, tag: str) -> bool:
        try:
            proc = self._run(
                [
                    "acr",
                    "repository",
                    "delete",
                    "--name",
                    self._registry,
                    "--image",
                    f"{self._repository}:{tag}",
                    "--yes",
                    "--output",
                    "none",
                ]
            )
        except OSError as exc:
            self._logger.error(
                f"Could not run '{self._az}'", tag=tag, error=str(exc)
            )
            return False
        if proc.returncode != 0:
            self._logger.debug(
                f"Deleting {self._repository}:{tag} failed",
                returncode=proc.returncode,
                stderr=proc.stderr.strip(),
            )
            return False
        return True
