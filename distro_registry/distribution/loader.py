"""Loader — build a registry from a directory of distribution definitions.

Each ``*.json`` / ``*.yaml`` document under the definitions directory
describes one distribution and is named after it (``centos-8.json``).
Large package indices may live next to it in ``<stem>-packages.<ext>``,
keyed by architecture name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from distro_registry.distribution.errors import (
    DistributionLoadError,
    DistributionNotFoundError,
    RepositorySourceError,
)
from distro_registry.distribution.models import (
    Architecture,
    DistributionFile,
    Package,
    Repository,
)
from distro_registry.distribution.registry import AllDistroRegistry
from distro_registry.distribution.schema import DISTRIBUTION_SCHEMA, PACKAGE_LIST_SCHEMA
from distro_registry.distribution.schema_validator import validate_schema

logger = logging.getLogger(__name__)

DEFINITION_SUFFIXES = (".json", ".yaml", ".yml")
PACKAGES_SUFFIX = "-packages"

# Top-level keys that are not architecture blocks
METADATA_KEYS = {"distribution", "module_platform_id", "oscap_name"}


def load_distro_registry(definitions_dir: str | Path) -> AllDistroRegistry:
    """Load and validate every distribution under ``definitions_dir``.

    Raises DistributionLoadError for unreadable, unparsable or duplicate
    definitions, and RepositorySourceError for the first malformed
    repository entry. Nothing is returned on failure.
    """
    distros: dict[str, DistributionFile] = {}
    sources: dict[str, Path] = {}

    for path in _definition_files(definitions_dir):
        data = _read_document(path)
        distro = _build_distribution(path, data)
        if distro.name in distros:
            raise DistributionLoadError(
                path, f"distribution '{distro.name}' is already defined in {sources[distro.name]}"
            )
        distros[distro.name] = distro
        sources[distro.name] = path

    logger.info(f"Loaded {len(distros)} distributions from {definitions_dir}")
    return AllDistroRegistry(distros)


def read_distribution(definitions_dir: str | Path, name: str) -> DistributionFile:
    """Load the single distribution called ``name``.

    Only the definition unit named ``<name>.json`` / ``.yaml`` / ``.yml`` is
    read. Raises DistributionNotFoundError when there is no such unit; a
    unit that exists but is malformed surfaces its own error.
    """
    matches = [p for p in _definition_files(definitions_dir) if p.stem == name]
    if not matches:
        raise DistributionNotFoundError(name)
    if len(matches) > 1:
        raise DistributionLoadError(
            matches[1], f"distribution '{name}' is already defined in {matches[0]}"
        )
    path = matches[0]
    return _build_distribution(path, _read_document(path))


# ── Internal helpers ────────────────────────────────────────────────


def _definition_files(definitions_dir: str | Path) -> list[Path]:
    """Definition units under ``definitions_dir``, in sorted order.

    ``<stem>-packages.<ext>`` is a package list only when a ``<stem>``
    definition sits in the same directory; otherwise it is a definition.
    """
    root = Path(definitions_dir)
    if not root.is_dir():
        raise DistributionLoadError(root, "definitions directory does not exist")
    candidates = [
        p for p in root.rglob("*") if p.is_file() and p.suffix in DEFINITION_SUFFIXES
    ]
    stems = {(p.parent, p.stem) for p in candidates}
    return sorted(p for p in candidates if not _is_package_list(p, stems))


def _is_package_list(path: Path, stems: set[tuple[Path, str]]) -> bool:
    if not path.stem.endswith(PACKAGES_SUFFIX):
        return False
    return (path.parent, path.stem[: -len(PACKAGES_SUFFIX)]) in stems


def _read_document(path: Path):
    logger.debug(f"Reading {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DistributionLoadError(path, f"cannot read file: {e}") from e
    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DistributionLoadError(path, f"cannot parse file: {e}") from e


def _build_distribution(path: Path, data) -> DistributionFile:
    issues = validate_schema(data, DISTRIBUTION_SCHEMA)
    if issues:
        raise DistributionLoadError(path, issues[0])

    meta = data["distribution"]
    if meta["name"] != path.stem:
        raise DistributionLoadError(
            path, f"declares distribution '{meta['name']}' but is named '{path.stem}'"
        )
    no_package_list = meta.get("no_package_list", False)

    arch_blocks = {k: v for k, v in data.items() if k not in METADATA_KEYS}
    external: dict[str, list[dict]] = {}
    needs_external = not no_package_list and any(
        "packages" not in block for block in arch_blocks.values()
    )
    if needs_external:
        external = _read_package_list(path)

    architectures = {}
    for arch_name, block in arch_blocks.items():
        if no_package_list:
            packages = None
        elif "packages" in block:
            packages = _packages(block["packages"])
        elif arch_name in external:
            packages = _packages(external[arch_name])
        else:
            packages = None
        architectures[arch_name] = Architecture(
            name=arch_name,
            image_types=tuple(block.get("image_types", [])),
            repositories=tuple(_repository(r) for r in block.get("repositories", [])),
            packages=packages,
        )

    distro = DistributionFile(
        name=meta["name"],
        description=meta.get("description", ""),
        restricted_access=meta.get("restricted_access", False),
        no_package_list=no_package_list,
        module_platform_id=data.get("module_platform_id", ""),
        oscap_name=data.get("oscap_name", ""),
        architectures=architectures,
    )

    try:
        distro.validate()
    except RepositorySourceError as e:
        logger.error(f"Invalid distribution {distro.name} in {path}: {e}")
        raise

    logger.debug(
        f"Parsed {distro.name}: architectures={distro.architecture_names()}, "
        f"restricted={distro.restricted_access}"
    )
    return distro


def _repository(data: dict) -> Repository:
    return Repository(
        id=data.get("id", ""),
        baseurl=data.get("baseurl"),
        metalink=data.get("metalink"),
        rhsm=data.get("rhsm", False),
        image_type_tags=tuple(data.get("image_type_tags") or ()),
    )


def _packages(items: list[dict]) -> tuple[Package, ...]:
    return tuple(Package(name=p["name"], summary=p.get("summary", "")) for p in items)


def _read_package_list(definition_path: Path) -> dict[str, list[dict]]:
    """Read the package list stored next to a definition, if there is one."""
    for suffix in DEFINITION_SUFFIXES:
        candidate = definition_path.with_name(
            f"{definition_path.stem}{PACKAGES_SUFFIX}{suffix}"
        )
        if candidate.is_file():
            data = _read_document(candidate)
            issues = validate_schema(data, PACKAGE_LIST_SCHEMA)
            if issues:
                raise DistributionLoadError(candidate, issues[0])
            return data
    logger.warning(f"No package list found for {definition_path}")
    return {}
