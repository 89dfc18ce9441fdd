"""Distro registry — entitlement-filtered views over loaded distributions.

The loaded ``AllDistroRegistry`` is never mutated. Views share the same
DistributionFile objects, so package indices are held exactly once no
matter how many views or readers exist.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from distro_registry.distribution.errors import DistributionNotFoundError
from distro_registry.distribution.models import DistributionFile

logger = logging.getLogger(__name__)


class DistroRegistry:
    """A read-only set of distributions visible to one class of caller."""

    def __init__(self, distros: Mapping[str, DistributionFile]):
        self._distros = MappingProxyType(dict(distros))

    def get(self, name: str) -> DistributionFile:
        """Exact lookup; raises DistributionNotFoundError outside this view."""
        try:
            return self._distros[name]
        except KeyError:
            raise DistributionNotFoundError(name) from None

    def names(self) -> list[str]:
        return sorted(self._distros)

    def list(self) -> list[DistributionFile]:
        """All distributions in this view, ordered by name."""
        return [self._distros[n] for n in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._distros

    def __iter__(self) -> Iterator[DistributionFile]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._distros)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DistroRegistry):
            return NotImplemented
        return dict(self._distros) == dict(other._distros)

    __hash__ = None  # type: ignore[assignment]


class AllDistroRegistry(DistroRegistry):
    """Every loaded distribution, with per-entitlement views precomputed."""

    def __init__(self, distros: Mapping[str, DistributionFile]):
        super().__init__(distros)
        self._entitled = DistroRegistry(self._distros)
        self._unentitled = DistroRegistry(
            {n: d for n, d in self._distros.items() if not d.needs_entitlement()}
        )

    def available(self, entitled: bool) -> DistroRegistry:
        """Distributions the caller may see.

        Unentitled callers do not see any distribution with a repository
        that requires a subscription; entitled callers see everything.
        """
        return self._entitled if entitled else self._unentitled


class ReloadableRegistry:
    """Publishes the current registry and swaps in a new one on reload.

    Readers call ``current`` and keep using the instance they got; a reload
    that fails leaves the previous registry in place.
    """

    def __init__(self, definitions_dir: str | Path):
        self.definitions_dir = Path(definitions_dir)
        self._lock = threading.Lock()
        self._registry = self._load()

    @property
    def current(self) -> AllDistroRegistry:
        return self._registry

    def available(self, entitled: bool) -> DistroRegistry:
        return self._registry.available(entitled)

    def reload(self) -> AllDistroRegistry:
        """Load the directory again and publish the result if it is valid."""
        with self._lock:
            try:
                registry = self._load()
            except Exception:
                logger.exception(f"Reload of {self.definitions_dir} failed, keeping previous registry")
                raise
            self._registry = registry
        logger.info(f"Reloaded {len(registry)} distributions from {self.definitions_dir}")
        return registry

    def _load(self) -> AllDistroRegistry:
        from distro_registry.distribution.loader import load_distro_registry

        return load_distro_registry(self.definitions_dir)
