"""Minimalist function set of the Azure Container Registry REST API.

We must be able to list tags, newest first, and to delete tags.

https://learn.microsoft.com/en-us/rest/api/containerregistry/
"""

import httpx

from ..config import RegistryAuth, RegistryConfig
from ..models.registry_category import RegistryCategory
from .registry import ContainerRegistryClient


class ACRClient(ContainerRegistryClient):
    """Client for talking to <registry>.azurecr.io directly."""

    def __init__(
        self,
        cfg: RegistryConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._check_category(cfg, RegistryCategory.ACR)
        super()._extract_registry_config(cfg)
        host = self._registry
        if "." not in host:
            host = f"{host}.{RegistryCategory.ACR.value}"
        self._url = f"https://{host}"
        self._http_client = httpx.Client(
            base_url=self._url, transport=transport
        )
        self._http_client.headers["accept"] = "application/json"

    def authenticate(self, auth: RegistryAuth) -> None:
        """Use HTTP basic auth with the username and password."""
        if not auth.username:
            self._logger.warning(
                f"No username supplied for {self._url}; requests will be "
                "anonymous"
            )
            return
        password = auth.password.get_secret_value() if auth.password else ""
        self._http_client.auth = httpx.BasicAuth(auth.username, password)
        self._logger.debug(f"Using basic auth as '{auth.username}'")

    def list_tags(self) -> list[str]:
        next_page: str | None = f"/acr/v1/{self._repository}/_tags"
        page_size = 100
        params: dict[str, str | int] | None = {
            "orderby": "timedesc",
            "n": page_size,
        }
        count = 0
        tags: list[str] = []
        try:
            while next_page:
                self._logger.debug(
                    f"Requesting {self._repository}: tags "
                    f"{count*page_size + 1}-{(count+1) * page_size}"
                )
                r = self._http_client.get(next_page, params=params)
                if r.status_code == 404:
                    self._logger.debug(f"No repository {self._repository}")
                    return []
                r.raise_for_status()
                obj = r.json() or {}
                if not isinstance(obj, dict):
                    raise TypeError(f"Unexpected tag listing: {obj!r}")
                tags.extend(x["name"] for x in obj.get("tags") or [])
                # The "next" link already carries the query string.
                next_page = r.links.get("next", {}).get("url")
                params = None
                count += 1
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            self._logger.warning(
                f"Listing tags for {self.name} failed; treating as no tags",
                error=str(exc),
            )
            return []
        return tags

    def delete_tag(self, tag: str) -> bool:
        url = f"/acr/v1/{self._repository}/_tags/{tag}"
        try:
            r = self._http_client.delete(url)
            r.raise_for_status()
        except httpx.HTTPError as exc:
            self._logger.debug(
                f"Deleting {self._repository}:{tag} failed", error=str(exc)
            )
            return False
        return True
