"""File selection rules for sync units."""

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union


class FileSelector:
    """Decides whether a path takes part in synchronization.

    Directories are always accepted so a recursive walk is never pruned;
    they are never copied themselves.
    """

    def accept(self, path: Path) -> bool:
        """Check whether a path is selected.

        Args:
            path: Candidate file or directory

        Returns:
            True if the path is selected
        """
        raise NotImplementedError

    def __call__(self, path: Path) -> bool:
        return self.accept(path)


class ExtensionSelector(FileSelector):
    """Selects files whose name ends with one of the configured suffixes.

    Matching is a plain case-sensitive ``endswith``; no dot is assumed, so
    ``.html`` matches ``foo.html`` and ``html`` matches ``foohtml``.

    Examples:
        >>> selector = ExtensionSelector([".js"])
        >>> selector.accept(Path("app.js"))
        True
        >>> selector.accept(Path("app.jsx"))
        False
    """

    def __init__(self, extensions: Optional[Iterable[str]] = None):
        self.suffixes: tuple[str, ...] = tuple(extensions or ())

    def accept(self, path: Path) -> bool:
        if path.is_dir():
            return True
        return path.name.endswith(self.suffixes) if self.suffixes else False


class PatternSelector(ExtensionSelector):
    """Selects files matching both a suffix and a path regular expression.

    The expression must match the whole absolute path, not a substring.
    """

    def __init__(
        self,
        extensions: Optional[Iterable[str]],
        pattern: Union[str, "re.Pattern[str]"],
    ):
        super().__init__(extensions)
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def accept(self, path: Path) -> bool:
        if path.is_dir():
            return True
        if not super().accept(path):
            return False
        return self.pattern.fullmatch(str(path.absolute())) is not None


def create_selector(
    extensions: Optional[Iterable[str]], pattern: Optional[str] = None
) -> FileSelector:
    """Build the selector matching a unit's filter settings.

    Args:
        extensions: Allowed file suffixes
        pattern: Optional regular expression on the absolute path

    Returns:
        PatternSelector when a pattern is given, ExtensionSelector otherwise
    """
    if pattern:
        return PatternSelector(extensions, pattern)
    return ExtensionSelector(extensions)
