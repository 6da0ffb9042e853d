"""Production registry client with mirror failover.

Every request walks the configured mirrors in order and stops at the first
success. Per-mirror failures are logged and collected; only exhausting every
mirror is reported to the caller.
"""

import logging
import re
from collections.abc import Sequence

import httpx

from modpm.core.errors import MirrorError, MirrorsUnreachableError
from modpm.core.lookup import Absent, Failed, Found, Lookup
from modpm.core.registry_client.abc import RegistryClient
from modpm.core.registry_client.types import ModuleMetadata, parse_module_metadata

logger = logging.getLogger(__name__)

_MODULE_LINK_PATTERN = re.compile(r"""<a href=["']/mod/([^"']+)["']""")


def _is_not_found(response: httpx.Response) -> bool:
    """Check whether a mirror answered "no such module".

    Some mirrors answer unknown modules with 200 and a literal "404" body.
    """
    if response.status_code == 404:
        return True
    body = response.text.strip()
    if body == "404":
        return True
    return response.status_code == 200 and body == ""


class RealRegistryClient(RegistryClient):
    """Registry client that fails over across mirrors using httpx."""

    def __init__(self, server_urls: Sequence[str], http_client: httpx.Client) -> None:
        """Create a client over `server_urls`, queried in the given order.

        Args:
            server_urls: Mirror base URLs, already in their per-process order
            http_client: Client used for every request
        """
        self._server_urls = [url.rstrip("/") for url in server_urls]
        self._http = http_client

    @property
    def server_urls(self) -> list[str]:
        return list(self._server_urls)

    def fetch_metadata(self, name: str) -> Lookup[ModuleMetadata]:
        errors: list[str] = []

        for server_url in self._server_urls:
            endpoint = f"{server_url}/api/packages/{name}"
            logger.debug("Fetching metadata for `%s` from %s", name, endpoint)
            try:
                response = self._http.get(endpoint)
            except httpx.HTTPError as e:
                errors.append(f"Failed to reach `{server_url}`: {e}")
                continue

            if _is_not_found(response):
                logger.debug("Module `%s` not found at %s", name, server_url)
                continue

            if response.status_code != 200:
                errors.append(
                    f"Failed to fetch metadata for `{name}` from `{server_url}`: "
                    f"HTTP {response.status_code}"
                )
                continue

            try:
                payload = response.json()
            except ValueError as e:
                errors.append(f"Failed to decode metadata for `{name}` from `{server_url}`: {e}")
                continue

            metadata = parse_module_metadata(payload)
            if metadata is None:
                errors.append(
                    f"Incomplete metadata for `{name}` from `{server_url}`: "
                    "missing `name` or `url`"
                )
                continue

            logger.debug("Found metadata for `%s` at %s", name, server_url)
            return Found(metadata)

        for error in errors:
            logger.debug(error)

        if errors:
            return Failed("\n".join(errors))
        return Absent()

    def probe_available(self) -> str:
        for server_url in self._server_urls:
            logger.debug("Trying registry server %s", server_url)
            try:
                response = self._http.head(server_url)
            except httpx.HTTPError as e:
                logger.debug("Registry server %s is unreachable: %s", server_url, e)
                continue
            if response.status_code >= 500:
                logger.debug(
                    "Registry server %s answered HTTP %s", server_url, response.status_code
                )
                continue
            return server_url

        raise MirrorsUnreachableError(self._server_urls)

    def increment_download_count(self, name: str) -> None:
        errors: list[str] = []

        for server_url in self._server_urls:
            endpoint = f"{server_url}/api/packages/{name}/incr_downloads"
            try:
                response = self._http.post(endpoint)
            except httpx.HTTPError as e:
                errors.append(f"Failed to reach `{server_url}`: {e}")
                continue

            if response.status_code == 200:
                logger.debug("Incremented download count of `%s` at %s", name, server_url)
                return

            errors.append(
                f"Failed to increment the download count of `{name}` at `{server_url}`: "
                f"HTTP {response.status_code}"
            )

        if not errors:
            errors.append("No registry servers configured")
        raise MirrorError("\n".join(errors))

    def list_all_modules(self) -> list[str]:
        server_url = self.probe_available()
        try:
            response = self._http.get(server_url)
        except httpx.HTTPError as e:
            raise MirrorError(f"Failed to list modules from `{server_url}`: {e}") from e

        if response.status_code != 200:
            raise MirrorError(
                f"Failed to list modules from `{server_url}`: HTTP {response.status_code}"
            )

        names: list[str] = []
        for match in _MODULE_LINK_PATTERN.finditer(response.text):
            name = match.group(1).strip("/")
            if name and name not in names:
                names.append(name)
        return names
