"""Typed failures raised by the distribution registry.

Callers branch on the exception class, never on the message text.
"""

from __future__ import annotations

from pathlib import Path


class DistributionError(Exception):
    """Base class for every registry failure."""


class DistributionNotFoundError(DistributionError):
    """The distribution is unknown, or hidden from the caller's view."""

    def __init__(self, name: str = ""):
        self.name = name
        super().__init__(f"Distribution '{name}' not found" if name else "Distribution not found")


class ArchitectureNotSupportedError(DistributionError):
    """The distribution does not define the requested architecture."""

    def __init__(self, architecture: str):
        self.architecture = architecture
        super().__init__(f"Architecture not supported: {architecture}")


class RepositorySourceError(DistributionError):
    """A repository entry has neither or both of baseurl and metalink."""

    def __init__(self, repository_id: str = "", architecture: str = "", distribution: str = ""):
        self.repository_id = repository_id
        self.architecture = architecture
        self.distribution = distribution
        where = "/".join(p for p in (distribution, architecture) if p)
        label = f"'{repository_id}' " if repository_id else ""
        message = f"Repository {label}must define exactly one of 'baseurl' or 'metalink'"
        super().__init__(f"{where}: {message}" if where else message)


class DistributionLoadError(DistributionError):
    """A definition file could not be read, parsed, or validated."""

    def __init__(self, path: str | Path, message: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")
