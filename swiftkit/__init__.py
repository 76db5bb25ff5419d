"""
SwiftKit - verified Swift toolchain installs with a local cache.
"""

__version__ = "0.1.0"
