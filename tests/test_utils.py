"""Unit tests for utility functions."""

from pylivesync.utils import (
    DEFAULT_EXTENSIONS,
    DEFAULT_UPDATE_INTERVAL,
    normalize_interval,
    strip_archive_suffix,
)


class TestStripArchiveSuffix:
    """Tests for strip_archive_suffix."""

    def test_strips_war(self):
        """A trailing .war is removed."""
        assert strip_archive_suffix("/opt/tomee/webapps/app.war") == (
            "/opt/tomee/webapps/app"
        )

    def test_strips_ear(self):
        """A trailing .ear is removed."""
        assert strip_archive_suffix("/srv/apps/shop.ear") == "/srv/apps/shop"

    def test_no_suffix_unchanged(self):
        """Paths without an archive suffix are returned unchanged."""
        assert strip_archive_suffix("/opt/tomee/webapps/app") == (
            "/opt/tomee/webapps/app"
        )

    def test_other_suffix_unchanged(self):
        """Only .war and .ear are stripped."""
        assert strip_archive_suffix("/opt/app.jar") == "/opt/app.jar"

    def test_only_trailing_suffix_stripped(self):
        """A suffix in the middle of the path is kept."""
        assert strip_archive_suffix("/opt/app.war/inner") == "/opt/app.war/inner"

    def test_strips_once(self):
        """Only the last suffix is removed."""
        assert strip_archive_suffix("/opt/app.war.war") == "/opt/app.war"


class TestNormalizeInterval:
    """Tests for normalize_interval."""

    def test_none_uses_default(self):
        assert normalize_interval(None) == DEFAULT_UPDATE_INTERVAL

    def test_zero_and_negative_use_default(self):
        assert normalize_interval(0) == 5
        assert normalize_interval(-3) == 5

    def test_positive_kept(self):
        assert normalize_interval(12) == 12


class TestConstants:
    """Tests for default constants."""

    def test_default_extensions(self):
        assert DEFAULT_EXTENSIONS == (".html", ".css", ".js", ".xhtml")
