"""
Configuration for the distribution registry.

Loads all configuration from environment variables with sensible defaults.
"""

import os

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Config:
    """
    Registry configuration from environment variables.

    Environment Variables:
        DISTRO_REGISTRY_DIR: Definitions directory. Default: distributions
        DISTRO_REGISTRY_ALLOW_FILE: Allow list file for restricted distributions. Default: empty
        DISTRO_REGISTRY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        DISTRO_REGISTRY_CASE_SENSITIVE_SEARCH: Match package names case-sensitively. Default: false
    """

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ

        self.DISTRIBUTIONS_DIR = env.get("DISTRO_REGISTRY_DIR", "distributions")
        self.ALLOW_FILE = env.get("DISTRO_REGISTRY_ALLOW_FILE", "")
        self.LOG_LEVEL = env.get("DISTRO_REGISTRY_LOG_LEVEL", "INFO").upper()
        self.CASE_SENSITIVE_SEARCH = (
            env.get("DISTRO_REGISTRY_CASE_SENSITIVE_SEARCH", "false").strip().lower() in _TRUE_VALUES
        )

    def __repr__(self):
        return (
            f"Config(DISTRIBUTIONS_DIR={self.DISTRIBUTIONS_DIR}, "
            f"ALLOW_FILE={self.ALLOW_FILE}, "
            f"LOG_LEVEL={self.LOG_LEVEL}, "
            f"CASE_SENSITIVE_SEARCH={self.CASE_SENSITIVE_SEARCH})"
        )
