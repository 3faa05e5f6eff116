"""Test fixtures for registry tag reaper."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import TypeAlias

import pytest
import yaml

from acr_reaper.config import KeepPolicy, RegistryAuth, RegistryConfig
from acr_reaper.models.registry_category import RegistryCategory
from acr_reaper.storage.azcli import AzureCLIClient
from acr_reaper.storage.registry import ContainerRegistryClient


class FakeRegistryClient(ContainerRegistryClient):
    """In-memory registry that records what it was asked to do."""

    def __init__(
        self,
        cfg: RegistryConfig,
        tags: list[str] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        super().__init__(cfg)
        self.remote_tags = list(tags or [])
        self.failing = failing or set()
        self.list_calls = 0
        self.delete_calls: list[str] = []

    def authenticate(self, auth: RegistryAuth) -> None:
        pass

    def list_tags(self) -> list[str]:
        self.list_calls += 1
        return list(self.remote_tags)

    def delete_tag(self, tag: str) -> bool:
        self.delete_calls.append(tag)
        if tag in self.failing:
            return False
        self.remote_tags.remove(tag)
        return True


@pytest.fixture
def support_dir() -> Path:
    return Path(__file__).parent / "support"


@pytest.fixture
def az_cfg(support_dir: Path) -> RegistryConfig:
    """Config for Azure CLI client with preloaded tags."""
    return RegistryConfig(
        category=RegistryCategory.AZ_CLI,
        registry="myregistry",
        repository="myrepo",
        keep=KeepPolicy(),
        dry_run=True,
        debug=True,
        input_file=support_dir / "az.contents.json",
    )


@pytest.fixture
def az_client(az_cfg: RegistryConfig) -> AzureCLIClient:
    """Azure CLI client with preloaded tags."""
    return AzureCLIClient(cfg=az_cfg)


@pytest.fixture
def live_cfg() -> RegistryConfig:
    """Config that deletes for real, with nothing preloaded."""
    return RegistryConfig(
        category=RegistryCategory.AZ_CLI,
        registry="myregistry",
        repository="myrepo",
        dry_run=False,
        debug=True,
    )


@pytest.fixture
def preloaded_tags(support_dir: Path) -> list[str]:
    """Tag list from the support dump, newest first."""
    obj = json.loads((support_dir / "az.contents.json").read_text())
    return obj["data"]


@pytest.fixture
def test_config(support_dir: Path) -> Iterator[Path]:
    """YAML configuration file pointing at the preloaded tag list."""
    with TemporaryDirectory() as td:
        new_config = Path(td) / "config.yaml"
        config = yaml.safe_load((support_dir / "config.yaml").read_text())
        config["inputFile"] = str(support_dir / "az.contents.json")
        new_config.write_text(yaml.dump(config))

        yield new_config


FakeFactory: TypeAlias = Callable[..., FakeRegistryClient]


@pytest.fixture
def make_fake(live_cfg: RegistryConfig) -> FakeFactory:
    """Build fake registries over arbitrary tag lists."""

    def _make(
        tags: list[str], failing: set[str] | None = None
    ) -> FakeRegistryClient:
        return FakeRegistryClient(live_cfg, tags=tags, failing=failing)

    return _make


@pytest.fixture
def fake_registry(
    make_fake: FakeFactory, preloaded_tags: list[str]
) -> FakeRegistryClient:
    """Fake registry holding the support tag list."""
    return make_fake(preloaded_tags)
