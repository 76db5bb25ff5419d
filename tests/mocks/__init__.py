"""
Test doubles for SwiftKit components.

The fakes record every call into a shared list so tests can assert on the
order in which the installer drives its collaborators.
"""

from .archives import make_tarball, make_traversal_tarball
from .pipeline import (
    FakeDownloader,
    FakeExtractor,
    FakeKeyStore,
    FakePathRegistry,
    FakeProcessRunner,
    FakeToolCache,
)

__all__ = [
    "make_tarball",
    "make_traversal_tarball",
    "FakeDownloader",
    "FakeExtractor",
    "FakeKeyStore",
    "FakePathRegistry",
    "FakeProcessRunner",
    "FakeToolCache",
]
