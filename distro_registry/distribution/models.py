"""Distribution data models — repositories, architectures, and package indices.

Instances are built once by the loader and never mutated afterwards, so a
single loaded registry can be shared by any number of concurrent readers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from distro_registry.distribution.errors import (
    ArchitectureNotSupportedError,
    RepositorySourceError,
)


@dataclass(frozen=True)
class Package:
    """A single entry of an architecture's package index."""

    name: str
    summary: str = ""


@dataclass(frozen=True)
class Repository:
    """One package source for an architecture."""

    id: str = ""
    baseurl: Optional[str] = None
    metalink: Optional[str] = None
    rhsm: bool = False  # Source requires a subscription
    image_type_tags: tuple[str, ...] = ()

    def validate(self) -> None:
        """Raise RepositorySourceError unless exactly one source is set."""
        if (self.baseurl is None) == (self.metalink is None):
            raise RepositorySourceError(self.id)

    def applies_to(self, image_type: str) -> bool:
        """Untagged repositories apply to every image type."""
        return not self.image_type_tags or image_type in self.image_type_tags


@dataclass(frozen=True)
class Architecture:
    """Image types, repositories and package index for one CPU architecture."""

    name: str = ""
    image_types: tuple[str, ...] = ()
    repositories: tuple[Repository, ...] = ()
    packages: Optional[tuple[Package, ...]] = None  # None: no package list shipped

    def validate(self) -> None:
        """Validate every repository in order; the first failure is raised."""
        for repo in self.repositories:
            try:
                repo.validate()
            except RepositorySourceError as e:
                raise RepositorySourceError(e.repository_id, architecture=self.name) from e

    def find_packages(self, query: str, case_sensitive: bool = False) -> list[Package]:
        """Return every indexed package whose name contains ``query``.

        Results keep index order. An architecture without a package index
        yields an empty list for any query.
        """
        if not self.packages:
            return []
        if case_sensitive:
            return [p for p in self.packages if query in p.name]
        needle = query.lower()
        return [p for p in self.packages if needle in p.name.lower()]

    def supports_image_type(self, image_type: str) -> bool:
        return image_type in self.image_types

    def repositories_for(self, image_type: str) -> list[Repository]:
        """Repositories usable when building ``image_type``, in declared order."""
        return [r for r in self.repositories if r.applies_to(image_type)]

    def needs_entitlement(self) -> bool:
        return any(r.rhsm for r in self.repositories)


@dataclass(frozen=True)
class DistributionFile:
    """One operating system release and its architectures."""

    name: str
    description: str = ""
    restricted_access: bool = False
    no_package_list: bool = False
    module_platform_id: str = ""
    oscap_name: str = ""
    architectures: Mapping[str, Architecture] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not isinstance(self.architectures, MappingProxyType):
            object.__setattr__(
                self, "architectures", MappingProxyType(dict(self.architectures))
            )

    def architecture(self, name: str) -> Architecture:
        """Exact-match lookup; raises ArchitectureNotSupportedError when absent."""
        try:
            return self.architectures[name]
        except KeyError:
            raise ArchitectureNotSupportedError(name) from None

    def architecture_names(self) -> list[str]:
        return sorted(self.architectures)

    def is_restricted(self) -> bool:
        """Whether building this distribution requires explicit allow-listing."""
        return self.restricted_access

    def needs_entitlement(self) -> bool:
        """True when any repository of any architecture requires a subscription."""
        return any(a.needs_entitlement() for a in self.architectures.values())

    def validate(self) -> None:
        """Validate architectures in sorted name order; first failure wins."""
        for arch_name in self.architecture_names():
            try:
                self.architectures[arch_name].validate()
            except RepositorySourceError as e:
                raise RepositorySourceError(
                    e.repository_id, architecture=arch_name, distribution=self.name
                ) from None
