"""Registry data types."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ModuleMetadata:
    """Registry record for a module name.

    Fetched on demand and never cached across runs.
    """

    name: str
    url: str
    vcs: str
    download_count: int
    description: str = ""


def parse_module_metadata(data: Any) -> ModuleMetadata | None:
    """Build ModuleMetadata from a decoded JSON payload.

    Returns:
        ModuleMetadata, or None if the payload is not an object or lacks a
        non-empty `name` or `url`
    """
    if not isinstance(data, dict):
        return None

    name = data.get("name")
    url = data.get("url")
    if not isinstance(name, str) or not name:
        return None
    if not isinstance(url, str) or not url:
        return None

    vcs = data.get("vcs")
    downloads = data.get("nr_downloads", 0)
    description = data.get("description")

    return ModuleMetadata(
        name=name,
        url=url,
        vcs=vcs if isinstance(vcs, str) and vcs else "git",
        download_count=downloads if isinstance(downloads, int) else 0,
        description=description if isinstance(description, str) else "",
    )
