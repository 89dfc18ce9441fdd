"""Per-organization allow list for restricted distributions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Optional

import yaml

from distro_registry.distribution.models import DistributionFile
from distro_registry.distribution.registry import DistroRegistry

logger = logging.getLogger(__name__)


class AllowListError(Exception):
    """The allow list file could not be read or has the wrong shape."""


class AccessDeniedError(Exception):
    """The caller's organization may not build a restricted distribution."""

    def __init__(self, org_id: str, distribution: str):
        self.org_id = org_id
        self.distribution = distribution
        super().__init__(
            f"This account's organization is not authorized to build {distribution} images"
        )


class AllowList:
    """Maps organization ids to the restricted distributions they may build."""

    def __init__(self, entries: Optional[Mapping[str, list[str]]] = None):
        self._entries: dict[str, frozenset[str]] = {
            org: frozenset(distros) for org, distros in (entries or {}).items()
        }

    @classmethod
    def load(cls, path: str | Path | None) -> AllowList:
        """Read an allow list file; an empty path gives an empty list."""
        if not path:
            return cls()
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
            data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise AllowListError(f"{path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict) or not all(
            isinstance(v, list) and all(isinstance(d, str) for d in v)
            for v in data.values()
        ):
            raise AllowListError(
                f"{path}: expected a mapping of organization id to a list of distribution names"
            )
        logger.info(f"Loaded allow list for {len(data)} organizations from {path}")
        return cls({str(org): distros for org, distros in data.items()})

    def is_allowed(self, org_id: str, distribution: str) -> bool:
        return distribution in self._entries.get(org_id, frozenset())

    def __len__(self) -> int:
        return len(self._entries)


def get_distro(
    view: DistroRegistry,
    name: str,
    org_id: str,
    allow_list: AllowList,
) -> DistributionFile:
    """Fetch a distribution from a view and verify the organization may build it.

    Raises DistributionNotFoundError when the view does not contain ``name``
    and AccessDeniedError when it is restricted and not allow-listed.
    """
    distro = view.get(name)
    if distro.is_restricted() and not allow_list.is_allowed(org_id, distro.name):
        logger.info(f"Organization {org_id} denied access to restricted distribution {distro.name}")
        raise AccessDeniedError(org_id, distro.name)
    return distro
