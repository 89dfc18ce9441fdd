"""Distro Registry — declarative OS build definitions with entitlement-aware lookups."""

__version__ = "0.1.0"
