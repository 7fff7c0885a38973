"""Tests for metadata probing."""

import os
from unittest.mock import patch

from dirkill.probe import directory_size, entry_from_probe, probe


class TestDirectorySize:
    def test_sums_nested_files(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"x" * 100)
        nested = tmp_path / "sub" / "deeper"
        nested.mkdir(parents=True)
        (nested / "b.bin").write_bytes(b"y" * 250)

        assert directory_size(str(tmp_path)) == 350

    def test_empty_directory(self, tmp_path):
        assert directory_size(str(tmp_path)) == 0

    def test_missing_directory(self, tmp_path):
        assert directory_size(str(tmp_path / "missing")) == 0

    def test_does_not_follow_symlinks(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"z" * 1000)
        measured = tmp_path / "measured"
        measured.mkdir()
        os.symlink(outside, measured / "link")

        assert directory_size(str(measured)) == 0


class TestProbe:
    def test_returns_parent_mtime(self, tmp_path):
        target = tmp_path / "project" / "node_modules"
        target.mkdir(parents=True)
        os.utime(tmp_path / "project", (1_000_000, 1_000_000))

        details = probe(str(target))
        assert details is not None
        size, parent_modified = details
        assert parent_modified == 1_000_000
        assert size == os.lstat(target).st_size

    def test_deep_size(self, tmp_path):
        target = tmp_path / "node_modules"
        target.mkdir()
        (target / "index.js").write_bytes(b"a" * 42)

        size, _ = probe(str(target), deep=True)
        assert size == 42

    def test_root_has_no_parent(self):
        assert probe("/") is None

    def test_relative_name_has_no_parent(self):
        assert probe("node_modules") is None

    def test_missing_path(self, tmp_path):
        assert probe(str(tmp_path / "gone" / "node_modules")) is None

    def test_stat_failure(self, tmp_path):
        with patch("dirkill.probe.os.lstat", side_effect=PermissionError("denied")):
            assert probe(str(tmp_path / "node_modules")) is None


class TestEntryFromProbe:
    def test_uses_details(self):
        entry = entry_from_probe("/p/node_modules", (2048, 900.0), now=1000.0)
        assert entry.size == 2048
        assert entry.age == 100
        assert entry.deleted is False

    def test_missing_details_degrade_to_zero(self):
        entry = entry_from_probe("/p/node_modules", None, now=1000.0)
        assert entry.size == 0
        assert entry.age == 0

    def test_age_can_be_negative(self):
        # Parent mtime in the future (clock skew)
        entry = entry_from_probe("/p/node_modules", (0, 1060.0), now=1000.0)
        assert entry.age == -60

    def test_sensitivity_flag(self):
        assert entry_from_probe("/home/u/.config/node_modules", None).is_sensitive
        assert not entry_from_probe("/home/u/proj/node_modules", None).is_sensitive
