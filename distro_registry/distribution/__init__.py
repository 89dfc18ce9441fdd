"""Distribution registry — loaded OS build definitions.

The registry provides:
- Loading: parse and validate a directory of distribution definitions
- Visibility: entitlement-filtered views of the loaded distributions
- Lookup: distributions, architectures and repository entries by name
- Search: substring search over an architecture's package index
"""

from distro_registry.distribution.errors import (
    ArchitectureNotSupportedError,
    DistributionError,
    DistributionLoadError,
    DistributionNotFoundError,
    RepositorySourceError,
)
from distro_registry.distribution.loader import load_distro_registry, read_distribution
from distro_registry.distribution.models import (
    Architecture,
    DistributionFile,
    Package,
    Repository,
)
from distro_registry.distribution.registry import (
    AllDistroRegistry,
    DistroRegistry,
    ReloadableRegistry,
)

__all__ = [
    "AllDistroRegistry",
    "Architecture",
    "ArchitectureNotSupportedError",
    "DistributionError",
    "DistributionFile",
    "DistributionLoadError",
    "DistributionNotFoundError",
    "DistroRegistry",
    "Package",
    "ReloadableRegistry",
    "Repository",
    "RepositorySourceError",
    "load_distro_registry",
    "read_distribution",
]
