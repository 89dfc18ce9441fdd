"""Access control for restricted distributions.

The registry only records which distributions are restricted; whether an
organization may build one is decided here, against an allow list.
"""

from distro_registry.access.allow_list import (
    AccessDeniedError,
    AllowList,
    AllowListError,
    get_distro,
)

__all__ = ["AccessDeniedError", "AllowList", "AllowListError", "get_distro"]
