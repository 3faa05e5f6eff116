"""Configuration for reaper for container registry tags."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import BaseModel, BeforeValidator, Field, SecretStr
from safir.pydantic import CamelCaseModel

from .models.registry_category import RegistryCategory

DEFAULT_KEEP_COUNT = 5
"""How many tags of each counted category to keep by default."""


def _empty_str_is_none(inp: Any) -> Any:
    if isinstance(inp, str) and inp == "":
        return None
    return inp


class RegistryAuth(BaseModel):
    """Basic authentication for the registry REST API.

    The Azure CLI client ignores this and relies on ``az login``.
    """

    username: Annotated[
        str | None,
        Field(
            title="Username",
            description=(
                "Username (if any) for authentication: the registry admin "
                "user, or a service principal ID."
            ),
            examples=["myregistry"],
        ),
    ] = None

    password: Annotated[
        SecretStr | None,
        Field(
            title="Password",
            description="Secret (password or token) for authentication.",
            examples=["hunter2"],
        ),
    ] = None


class KeepPolicy(BaseModel):
    """How many of the most recent tags in each category to keep.

    A count of ``0`` means "purge them all".  A negative count means "do not
    reap that category at all".  The ``latest`` tag is always kept and
    cannot be configured away.
    """

    semver: Annotated[
        int,
        Field(
            title="Semantic version",
            description=(
                "Number of most recent semantic version tags (1.2.3 or "
                "1.2.3.4) to keep."
            ),
            examples=[5],
        ),
    ] = DEFAULT_KEEP_COUNT

    alphanumeric: Annotated[
        int,
        Field(
            title="Alphanumeric",
            description=(
                "Number of most recent alphanumeric tags (six or more "
                "letters and digits, such as short commit hashes) to keep."
            ),
            examples=[5],
        ),
    ] = DEFAULT_KEEP_COUNT


class RegistryConfig(CamelCaseModel):
    """Configuration to reap a single repository in a container registry."""

    registry: Annotated[
        str,
        Field(
            title="Registry",
            description=(
                "Name of the Azure Container Registry, or its login server "
                "hostname"
            ),
            examples=["myregistry", "myregistry.azurecr.io"],
        ),
    ]

    repository: Annotated[
        str,
        Field(
            title="Repository",
            description="Repository name within the registry",
            examples=["myrepo"],
        ),
    ]

    category: Annotated[
        RegistryCategory,
        Field(
            title="Category",
            description="How to talk to the registry",
            examples=[RegistryCategory.AZ_CLI],
        ),
    ] = RegistryCategory.AZ_CLI

    keep: KeepPolicy = Field(
        default_factory=KeepPolicy,
        title="Keep Policy",
        description="Policy for which tags to retain.",
    )

    auth: Annotated[
        RegistryAuth | None,
        Field(
            title="Registry Auth",
            description="Authentication details for specified registry.",
        ),
    ] = None

    dry_run: Annotated[
        bool,
        Field(
            title="Dry run",
            description="Do not actually delete any tags from registry.",
        ),
    ] = False

    debug: Annotated[
        bool,
        Field(
            title="Debug",
            description="Much more verbose logging.",
        ),
    ] = False

    input_file: Annotated[
        Path | None,
        BeforeValidator(_empty_str_is_none),
        Field(
            title="Input file",
            description=(
                "If supplied, use the tag list from this file, rather than "
                "scanned from actual repository."
            ),
        ),
    ] = None

    @classmethod
    def from_file(cls, path: Path, registry: str, repository: str) -> Self:
        """Load defaults from a YAML file for a particular repository.

        Parameters
        ----------
        path
            YAML file containing any fields of this model except
            ``registry`` and ``repository``.
        registry
            Registry name.
        repository
            Repository name.

        Returns
        -------
        RegistryConfig
            Validated configuration.
        """
        data = yaml.safe_load(path.read_text()) or {}
        data["registry"] = registry
        data["repository"] = repository
        return cls.model_validate(data)
