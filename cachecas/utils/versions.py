# ==============================================================================
# Version Reporting
# ==============================================================================
"""
Versions of cachecas and the libraries its store and retry behavior depend on.

Reported by `cachecas status` so that a conflict or transport problem can be
matched to the redis-py and tenacity releases actually installed.
"""

from importlib.metadata import PackageNotFoundError, version

# Distributions whose behavior shows up in store and retry results
STACK_PACKAGES = ("redis", "tenacity", "pydantic")


def get_cachecas_version() -> str:
    """Installed cachecas version, or the source tree's version when not installed."""
    try:
        return version("cachecas")
    except PackageNotFoundError:
        from cachecas import __version__

        return __version__


def get_stack_versions() -> dict[str, str]:
    """
    Map cachecas and each of STACK_PACKAGES to its installed version.

    Returns:
        Dict such as {"cachecas": "0.1.0", "redis": "5.0.1", ...}; a
        distribution that is not installed is reported as "missing"
    """
    versions = {"cachecas": get_cachecas_version()}
    for package in STACK_PACKAGES:
        try:
            versions[package] = version(package)
        except PackageNotFoundError:
            versions[package] = "missing"
    return versions
