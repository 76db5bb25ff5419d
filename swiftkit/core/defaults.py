"""
Well-known locations of the Swift release infrastructure.
"""

DEFAULT_DOWNLOAD_HOST = "https://swift.org/builds"
DEFAULT_KEYS_URL = "https://swift.org/keys/all-keys.asc"
DEFAULT_KEYSERVER = "hkp://keyserver.ubuntu.com"
DEFAULT_KEY_PUBLISHER = "Swift"

__all__ = [
    "DEFAULT_DOWNLOAD_HOST",
    "DEFAULT_KEYS_URL",
    "DEFAULT_KEYSERVER",
    "DEFAULT_KEY_PUBLISHER",
]
