"""
Tests for the directory tool cache.
"""

from unittest.mock import patch

import pytest
from filelock import Timeout

from swiftkit.core.exceptions import CacheError, CacheLockTimeout
from swiftkit.core.tool_cache import COMPLETE_SUFFIX, DirectoryToolCache

NAMESPACE = "swift-ubuntu"


@pytest.fixture
def cache(tmp_path):
    """Tool cache for a fixed architecture."""
    return DirectoryToolCache(tmp_path / "cache", arch="x64", lock_timeout=1)


@pytest.fixture
def toolchain_dir(tmp_path):
    """Directory shaped like an extracted Swift release."""
    source = tmp_path / "extract" / "swift-5.9-RELEASE-ubuntu20.04"
    (source / "usr" / "bin").mkdir(parents=True)
    (source / "usr" / "bin" / "swift").write_text("#!/bin/sh\n")
    return source


class TestFind:
    """Test lookups."""

    def test_miss_on_empty_cache(self, cache):
        assert cache.find(NAMESPACE, "5.9") is None

    def test_hit_after_put(self, cache, toolchain_dir):
        root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.find(NAMESPACE, "5.9") == root
        assert (root / "usr" / "bin" / "swift").exists()

    def test_layout(self, cache, toolchain_dir):
        """Entries live at toolchains/<namespace>/<version>/<arch>."""
        root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert root == cache.cache_dir / "toolchains" / NAMESPACE / "5.9" / "x64"
        assert root.with_name("x64" + COMPLETE_SUFFIX).exists()

    def test_directory_without_marker_is_absent(self, cache):
        """A populated directory is not a hit until its marker exists."""
        entry = cache.entry_path(NAMESPACE, "5.9")
        (entry / "usr" / "bin").mkdir(parents=True)

        assert cache.find(NAMESPACE, "5.9") is None

    def test_marker_without_directory_is_absent(self, cache):
        entry = cache.entry_path(NAMESPACE, "5.9")
        entry.parent.mkdir(parents=True)
        entry.with_name(entry.name + COMPLETE_SUFFIX).touch()

        assert cache.find(NAMESPACE, "5.9") is None

    @pytest.mark.parametrize("version", ["", "   ", "..", "5.9/../../etc"])
    def test_blank_or_invalid_version_is_miss(self, cache, version):
        assert cache.find(NAMESPACE, version) is None

    def test_keyed_by_architecture(self, tmp_path, toolchain_dir):
        """An arm64 lookup does not see an x64 installation."""
        DirectoryToolCache(tmp_path / "cache", arch="x64").put(
            toolchain_dir, NAMESPACE, "5.9"
        )

        assert DirectoryToolCache(tmp_path / "cache", arch="arm64").find(
            NAMESPACE, "5.9"
        ) is None

    def test_keyed_by_namespace(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.find("swift-debian", "5.9") is None


class TestPut:
    """Test storing installations."""

    def test_source_left_intact(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert (toolchain_dir / "usr" / "bin" / "swift").exists()

    def test_overwrites_existing_entry(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")
        (toolchain_dir / "usr" / "bin" / "swift").write_text("new")

        root = cache.put(toolchain_dir, NAMESPACE, "5.9", replace=True)

        assert (root / "usr" / "bin" / "swift").read_text() == "new"

    def test_existing_entry_kept_without_replace(self, cache, toolchain_dir):
        """An installed entry is left alone unless replacement is asked for."""
        first = cache.put(toolchain_dir, NAMESPACE, "5.9")
        (toolchain_dir / "usr" / "bin" / "swift").write_text("new")

        with patch("swiftkit.core.tool_cache.copy_tree") as mock_copy:
            root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        mock_copy.assert_not_called()
        assert root == first
        assert (root / "usr" / "bin" / "swift").read_text() == "#!/bin/sh\n"

    def test_incomplete_entry_replaced_without_flag(self, cache, toolchain_dir):
        """A directory without its marker is not an entry and gets overwritten."""
        stale = cache.entry_path(NAMESPACE, "5.9")
        stale.mkdir(parents=True)
        (stale / "partial").write_text("x")

        root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert not (root / "partial").exists()
        assert cache.find(NAMESPACE, "5.9") == root

    def test_no_staging_left_behind(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")

        names = sorted(p.name for p in (cache.toolchains_dir / NAMESPACE / "5.9").iterdir())
        assert names == ["x64", "x64" + COMPLETE_SUFFIX]

    def test_missing_source(self, cache, tmp_path):
        with pytest.raises(CacheError, match="does not exist"):
            cache.put(tmp_path / "missing", NAMESPACE, "5.9")

    @pytest.mark.parametrize("version", ["", "..", "a/b", "a\\b"])
    def test_invalid_version_rejected(self, cache, toolchain_dir, version):
        with pytest.raises(CacheError):
            cache.put(toolchain_dir, NAMESPACE, version)

    def test_failed_copy_leaves_no_entry(self, cache, toolchain_dir):
        """A failure while copying never produces a visible entry."""
        with patch(
            "swiftkit.core.tool_cache.copy_tree", side_effect=OSError("disk full")
        ):
            with pytest.raises(CacheError, match="disk full"):
                cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.find(NAMESPACE, "5.9") is None

    def test_records_registry_entry(self, cache, toolchain_dir):
        root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        info = cache.get_entry_info(NAMESPACE, "5.9")
        assert info["namespace"] == NAMESPACE
        assert info["version"] == "5.9"
        assert info["arch"] == "x64"
        assert info["path"] == str(root.resolve())
        assert "installed" in info

    def test_index_failure_keeps_committed_entry(self, cache, toolchain_dir, caplog):
        """A committed entry stays usable when the index cannot be written."""
        with patch(
            "swiftkit.core.tool_cache.atomic_write", side_effect=OSError("disk full")
        ):
            root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.find(NAMESPACE, "5.9") == root
        assert cache.get_entry_info(NAMESPACE, "5.9") is None
        assert "disk full" in caplog.text

    def test_size_failure_keeps_committed_entry(self, cache, toolchain_dir):
        with patch(
            "swiftkit.core.tool_cache.directory_size",
            side_effect=OSError("permission denied"),
        ):
            root = cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.find(NAMESPACE, "5.9") == root
        assert cache.get_entry_info(NAMESPACE, "5.9") is None

    def test_lock_timeout(self, cache, toolchain_dir):
        with patch("swiftkit.core.tool_cache.FileLock") as mock_lock:
            mock_lock.return_value.__enter__.side_effect = Timeout(str(cache.lock_path))

            with pytest.raises(CacheLockTimeout):
                cache.put(toolchain_dir, NAMESPACE, "5.9")

    def test_lock_timeout_is_cache_error(self):
        assert issubclass(CacheLockTimeout, CacheError)


class TestHousekeeping:
    """Test listing and removal."""

    def test_list_versions(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")
        cache.put(toolchain_dir, NAMESPACE, "5.8")
        (cache.toolchains_dir / NAMESPACE / "6.0").mkdir()

        assert cache.list_versions(NAMESPACE) == ["5.8", "5.9"]

    def test_list_unknown_namespace(self, cache):
        assert cache.list_versions("swift-fedora") == []

    def test_remove(self, cache, toolchain_dir):
        cache.put(toolchain_dir, NAMESPACE, "5.9")

        assert cache.remove(NAMESPACE, "5.9") is True
        assert cache.find(NAMESPACE, "5.9") is None
        assert cache.get_entry_info(NAMESPACE, "5.9") is None

    def test_remove_missing(self, cache):
        assert cache.remove(NAMESPACE, "5.9") is False

    def test_corrupt_registry(self, cache, toolchain_dir):
        cache.registry_path.parent.mkdir(parents=True, exist_ok=True)
        cache.registry_path.write_text("{not json")

        with pytest.raises(CacheError, match="registry"):
            cache.get_entry_info(NAMESPACE, "5.9")
