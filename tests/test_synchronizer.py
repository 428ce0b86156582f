"""Tests for the synchronizer."""

import logging
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from pylivesync.exceptions import SyncPassError
from pylivesync.sync.synchronizer import Synchronizer
from pylivesync.sync.unit import SyncUnit


class FakeClock:
    """Clock returning scripted timestamps."""

    def __init__(self, *times: float):
        self.times = list(times)
        self.calls = 0

    def __call__(self) -> float:
        value = self.times[min(self.calls, len(self.times) - 1)]
        self.calls += 1
        return value


def _write(path: Path, content: str, mtime: float) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


class TestSynchronizer:
    """Test Synchronizer functionality."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for testing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def unit(self, temp_dir):
        """Create a unit with both directory pairs inside temp_dir."""
        return SyncUnit(
            resources_dir=temp_dir / "webapp",
            target_resources_dir=temp_dir / "deploy",
            binaries_dir=temp_dir / "classes",
            target_binaries_dir=temp_dir / "deploy" / "WEB-INF" / "classes",
            extensions=[".html", ".js", ".class"],
        )

    def test_initial_watermark_from_clock(self, unit):
        synchronizer = Synchronizer(unit, clock=FakeClock(42.0))
        assert synchronizer.watermark == 42.0

    def test_explicit_watermark(self, unit):
        synchronizer = Synchronizer(unit, watermark=7.0, clock=FakeClock(42.0))
        assert synchronizer.watermark == 7.0

    def test_nothing_newer_than_watermark(self, unit, temp_dir):
        """Files older than the watermark are never written."""
        _write(temp_dir / "webapp" / "index.html", "<html/>", 100.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 0
        assert not (temp_dir / "deploy").exists()

    def test_old_file_not_copied_even_if_target_differs(self, unit, temp_dir):
        _write(temp_dir / "webapp" / "index.html", "new", 100.0)
        _write(temp_dir / "deploy" / "index.html", "old", 50.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 0
        assert (temp_dir / "deploy" / "index.html").read_text() == "old"

    def test_copy_mirrors_relative_path_and_stamps_mtime(self, unit, temp_dir):
        """The copy lands at target + relative path with the scan timestamp."""
        _write(temp_dir / "webapp" / "views" / "index.html", "<html/>", 180.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 1

        target = temp_dir / "deploy" / "views" / "index.html"
        assert target.read_text() == "<html/>"
        assert target.stat().st_mtime == pytest.approx(200.0)

    def test_file_at_watermark_is_copied(self, unit, temp_dir):
        _write(temp_dir / "webapp" / "index.html", "x", 150.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 1

    def test_both_pairs_counted(self, unit, temp_dir):
        """Resources and binaries are synchronized in one pass."""
        _write(temp_dir / "webapp" / "app.js", "js", 180.0)
        _write(temp_dir / "classes" / "com" / "Foo.class", "cafebabe", 180.0)
        _write(temp_dir / "classes" / "readme.txt", "ignored", 180.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 2
        assert (temp_dir / "deploy" / "app.js").exists()
        assert (
            temp_dir / "deploy" / "WEB-INF" / "classes" / "com" / "Foo.class"
        ).exists()
        assert not (temp_dir / "deploy" / "WEB-INF" / "classes" / "readme.txt").exists()

    def test_second_pass_without_changes_copies_nothing(self, unit, temp_dir):
        _write(temp_dir / "webapp" / "index.html", "x", 100.0)
        synchronizer = Synchronizer(
            unit, watermark=0.0, clock=FakeClock(200.0, 300.0)
        )

        assert synchronizer.run() == 1
        assert synchronizer.watermark == 200.0
        assert synchronizer.run() == 0
        assert synchronizer.watermark == 300.0

    def test_file_touched_again_is_copied_again(self, unit, temp_dir):
        source = _write(temp_dir / "webapp" / "index.html", "v1", 100.0)
        synchronizer = Synchronizer(
            unit, watermark=0.0, clock=FakeClock(200.0, 300.0)
        )
        synchronizer.run()

        _write(source, "v2", 250.0)

        assert synchronizer.run() == 1
        assert (temp_dir / "deploy" / "index.html").read_text() == "v2"

    def test_scan_timestamp_captured_once(self, unit, temp_dir):
        """Both pairs share the timestamp taken at the start of the pass."""
        _write(temp_dir / "webapp" / "a.html", "a", 180.0)
        _write(temp_dir / "classes" / "B.class", "b", 180.0)
        clock = FakeClock(200.0, 999.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=clock)

        synchronizer.run()

        assert clock.calls == 1
        assert (temp_dir / "deploy" / "a.html").stat().st_mtime == pytest.approx(200.0)
        binaries = temp_dir / "deploy" / "WEB-INF" / "classes" / "B.class"
        assert binaries.stat().st_mtime == pytest.approx(200.0)

    def test_missing_source_skipped(self, unit, temp_dir, caplog):
        synchronizer = Synchronizer(unit, watermark=0.0, clock=FakeClock(200.0))

        with caplog.at_level(logging.DEBUG, logger="pylivesync"):
            assert synchronizer.run() == 0

        assert "doesn't exist" in caplog.text
        assert synchronizer.watermark == 200.0

    def test_source_not_a_directory_skipped(self, unit, temp_dir, caplog):
        _write(temp_dir / "webapp", "not a dir", 180.0)
        _write(temp_dir / "classes" / "A.class", "a", 180.0)
        synchronizer = Synchronizer(unit, watermark=0.0, clock=FakeClock(200.0))

        with caplog.at_level(logging.WARNING, logger="pylivesync"):
            assert synchronizer.run() == 1

        assert "is not a directory, skipping" in caplog.text

    def test_copy_failure_does_not_abort_pass(self, unit, temp_dir, caplog):
        _write(temp_dir / "webapp" / "a.html", "a", 180.0)
        _write(temp_dir / "webapp" / "b.html", "b", 180.0)
        synchronizer = Synchronizer(unit, watermark=0.0, clock=FakeClock(200.0))
        real_copy = synchronizer.operations.copy_file

        def flaky_copy(local_file, target_path, timestamp):
            if local_file.relative_path == "a.html":
                raise OSError("disk full")
            return real_copy(local_file, target_path, timestamp)

        with patch.object(synchronizer.operations, "copy_file", side_effect=flaky_copy):
            with caplog.at_level(logging.ERROR, logger="pylivesync"):
                assert synchronizer.run() == 1

        assert "disk full" in caplog.text
        assert synchronizer.last_stats["failed"] == 1
        assert synchronizer.last_stats["created"] == 1
        assert synchronizer.watermark == 200.0

    def test_failed_copy_not_retried_until_touched(self, unit, temp_dir):
        """The watermark advances past failed copies."""
        _write(temp_dir / "webapp" / "a.html", "a", 180.0)
        synchronizer = Synchronizer(
            unit, watermark=0.0, clock=FakeClock(200.0, 300.0)
        )

        with patch.object(
            synchronizer.operations, "copy_file", side_effect=OSError("busy")
        ):
            assert synchronizer.run() == 0

        assert synchronizer.run() == 0
        assert not (temp_dir / "deploy" / "a.html").exists()

    def test_unlistable_source_raises_pass_error(self, unit, temp_dir):
        (temp_dir / "webapp").mkdir()
        synchronizer = Synchronizer(unit, watermark=10.0, clock=FakeClock(200.0))

        with patch.object(
            synchronizer.scanner, "scan_local", side_effect=PermissionError("denied")
        ):
            with pytest.raises(SyncPassError, match="denied"):
                synchronizer.run()

        assert synchronizer.watermark == 10.0

    def test_stats_created_and_updated(self, unit, temp_dir):
        _write(temp_dir / "webapp" / "new.html", "n", 180.0)
        _write(temp_dir / "webapp" / "old.html", "o", 180.0)
        _write(temp_dir / "deploy" / "old.html", "stale", 10.0)
        synchronizer = Synchronizer(unit, watermark=150.0, clock=FakeClock(200.0))

        synchronizer.run()

        assert synchronizer.last_stats == {
            "created": 1,
            "updated": 1,
            "skips": 0,
            "failed": 0,
        }

    def test_pattern_unit(self, temp_dir):
        unit = SyncUnit(
            resources_dir=temp_dir / "webapp",
            target_resources_dir=temp_dir / "deploy",
            extensions=[".html"],
            pattern=".*/views/.*",
        )
        _write(temp_dir / "webapp" / "views" / "index.html", "v", 180.0)
        _write(temp_dir / "webapp" / "other" / "index.html", "o", 180.0)
        synchronizer = Synchronizer(unit, watermark=0.0, clock=FakeClock(200.0))

        assert synchronizer.run() == 1
        assert (temp_dir / "deploy" / "views" / "index.html").exists()
        assert not (temp_dir / "deploy" / "other").exists()

    def test_interval_ms(self, unit):
        unit.update_interval = 3
        assert Synchronizer(unit).interval_ms == 3000
