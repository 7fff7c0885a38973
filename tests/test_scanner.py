"""Tests for directory discovery."""

import os
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from dirkill.models import ScanConfig
from dirkill.scanner import Visit, classify, find_matches, scan_directory


@pytest.fixture
def config():
    return ScanConfig(deep_size=True)


class TestClassify:
    def test_match(self, config):
        assert classify("/p/node_modules", "node_modules", config) is Visit.MATCH

    def test_nested_match_pruned(self, config):
        path = "/p/node_modules/a/node_modules"
        assert classify(path, "node_modules", config) is Visit.PRUNE

    def test_excluded_match_pruned(self):
        config = ScanConfig(exclude=("legacy",))
        assert classify("/legacy/node_modules", "node_modules", config) is Visit.PRUNE

    def test_hidden_descended_by_default(self, config):
        assert classify("/home/u/.cache", ".cache", config) is Visit.DESCEND

    def test_hidden_pruned_when_excluding(self):
        config = ScanConfig(exclude_hidden=True)
        assert classify("/home/u/.cache", ".cache", config) is Visit.PRUNE

    def test_hidden_match_still_reported_when_excluding(self):
        config = ScanConfig(exclude_hidden=True, target=".venv")
        assert classify("/home/u/proj/.venv", ".venv", config) is Visit.MATCH


class TestFindMatches:
    def test_finds_matching_directory(self, tmp_path, config):
        node_modules = tmp_path / "project" / "node_modules"
        node_modules.mkdir(parents=True)
        (node_modules / "package.json").write_text("{}")

        assert list(find_matches(tmp_path, config)) == [str(node_modules)]

    def test_finds_directories_in_several_projects(self, tmp_path, config):
        for project in ["project1", "project2", "project3"]:
            (tmp_path / project / "node_modules").mkdir(parents=True)

        assert len(list(find_matches(tmp_path, config))) == 3

    def test_skips_nested_matches(self, tmp_path, config):
        outer = tmp_path / "project" / "node_modules"
        inner = outer / "some-package" / "node_modules"
        inner.mkdir(parents=True)

        assert list(find_matches(tmp_path, config)) == [str(outer)]

    def test_match_below_similarly_named_directory_is_skipped(self, tmp_path, config):
        (tmp_path / "node_modules_old" / "app" / "node_modules").mkdir(parents=True)
        kept = tmp_path / "web" / "node_modules"
        kept.mkdir(parents=True)

        assert list(find_matches(tmp_path, config)) == [str(kept)]

    def test_root_itself_can_match(self, tmp_path, config):
        root = tmp_path / "node_modules"
        root.mkdir()

        assert list(find_matches(root, config)) == [str(root)]

    def test_ignores_files_with_target_name(self, tmp_path, config):
        (tmp_path / "node_modules").write_text("not a directory")

        assert list(find_matches(tmp_path, config)) == []

    def test_does_not_follow_symlinks(self, tmp_path, config):
        real = tmp_path / "real"
        (real / "node_modules").mkdir(parents=True)
        scanned = tmp_path / "scanned"
        scanned.mkdir()
        os.symlink(real, scanned / "link")

        assert list(find_matches(scanned, config)) == []

    def test_respects_exclusions(self, tmp_path):
        (tmp_path / "keep" / "node_modules").mkdir(parents=True)
        (tmp_path / "skip-me" / "node_modules").mkdir(parents=True)
        config = ScanConfig(exclude=("skip-me",))

        assert list(find_matches(tmp_path, config)) == [str(tmp_path / "keep" / "node_modules")]

    def test_hidden_locations_pruned_when_excluding(self, tmp_path):
        (tmp_path / ".cache" / "pkg" / "node_modules").mkdir(parents=True)
        (tmp_path / "proj" / "node_modules").mkdir(parents=True)

        excluding = ScanConfig(exclude_hidden=True)
        assert list(find_matches(tmp_path, excluding)) == [str(tmp_path / "proj" / "node_modules")]

        including = ScanConfig()
        assert len(list(find_matches(tmp_path, including))) == 2

    def test_handles_permission_error(self, tmp_path, config):
        (tmp_path / "project" / "node_modules").mkdir(parents=True)

        with patch("dirkill.scanner.os.scandir", side_effect=PermissionError("Access denied")):
            assert list(find_matches(tmp_path, config)) == []

    def test_custom_target(self, tmp_path):
        venv = tmp_path / "project" / ".venv"
        venv.mkdir(parents=True)

        assert list(find_matches(tmp_path, ScanConfig(target=".venv"))) == [str(venv)]


class TestScanDirectory:
    def test_builds_entries(self, tmp_path, config):
        node_modules = tmp_path / "project" / "node_modules"
        (node_modules / "react").mkdir(parents=True)
        (node_modules / "react" / "index.js").write_text("module.exports = {}")

        entries = scan_directory(tmp_path, config)
        assert len(entries) == 1
        assert entries[0].path == str(node_modules.resolve())
        assert entries[0].size == len("module.exports = {}")
        assert entries[0].deleted is False

    def test_uses_given_executor(self, tmp_path, config):
        for project in ["a", "b"]:
            (tmp_path / project / "node_modules").mkdir(parents=True)

        with ThreadPoolExecutor(max_workers=2) as pool:
            entries = scan_directory(tmp_path, config, executor=pool)
        assert sorted(e.path for e in entries) == [
            str((tmp_path / "a" / "node_modules").resolve()),
            str((tmp_path / "b" / "node_modules").resolve()),
        ]

    def test_flags_sensitive_matches(self, tmp_path, config):
        (tmp_path / ".hidden" / "node_modules").mkdir(parents=True)

        entries = scan_directory(tmp_path, config)
        assert len(entries) == 1
        assert entries[0].is_sensitive

    def test_file_root_yields_nothing(self, tmp_path, config):
        file_root = tmp_path / "README.md"
        file_root.write_text("hi")

        assert scan_directory(file_root, config) == []

    def test_missing_root_yields_nothing(self, tmp_path, config):
        assert scan_directory(tmp_path / "missing", config) == []

    def test_symlink_root_yields_nothing(self, tmp_path, config):
        real = tmp_path / "real"
        (real / "node_modules").mkdir(parents=True)
        link = tmp_path / "link"
        os.symlink(real, link)

        assert scan_directory(link, config) == []

    def test_probe_failure_keeps_match(self, tmp_path, config):
        (tmp_path / "node_modules").mkdir()

        with patch("dirkill.scanner.probe", return_value=None):
            entries = scan_directory(tmp_path, config)
        assert len(entries) == 1
        assert entries[0].size == 0
        assert entries[0].age == 0
