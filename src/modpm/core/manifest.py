"""Module manifest I/O.

Every module may ship a `module.yaml` at its top level:

    name: json_tools
    version: 0.3.1
    description: JSON helpers
    author: Jane Doe
    license: MIT
    repo_url: https://example.com/jane/json_tools
    dependencies:
      - jane.strings
      - https://example.com/other/lib
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from modpm.core.errors import ManifestError

MANIFEST_FILE_NAME = "module.yaml"


@dataclass(frozen=True)
class Manifest:
    """Parsed module manifest. Read-only."""

    name: str
    version: str = ""
    description: str = ""
    author: str = ""
    license: str = ""
    repo_url: str = ""
    dependencies: list[str] = field(default_factory=list)


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def load_manifest(manifest_path: Path) -> Manifest:
    """Load a manifest file.

    Raises:
        ManifestError: If the file is not valid YAML or not a mapping
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ManifestError(f"Failed to parse {manifest_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(f"Failed to parse {manifest_path}: expected a mapping")

    dependencies = data.get("dependencies") or []
    if not isinstance(dependencies, list):
        raise ManifestError(f"Failed to parse {manifest_path}: `dependencies` must be a list")

    return Manifest(
        name=_as_str(data.get("name")),
        version=_as_str(data.get("version")),
        description=_as_str(data.get("description")),
        author=_as_str(data.get("author")),
        license=_as_str(data.get("license")),
        repo_url=_as_str(data.get("repo_url")),
        dependencies=[str(dep) for dep in dependencies],
    )


def read_module_manifest(module_dir: Path) -> Manifest | None:
    """Load the manifest of the module checked out at `module_dir`.

    Returns:
        The manifest, or None if the module has none
    """
    manifest_path = module_dir / MANIFEST_FILE_NAME
    if not manifest_path.is_file():
        return None
    return load_manifest(manifest_path)
