# file_collector/ignore_evaluator.py
"""
Decides whether a path is ignored by an ordered list of compiled patterns.

Later patterns override earlier ones. A negated pattern re-includes a path
only when none of its ancestor directories is excluded.
"""
from pathlib import Path

from file_collector.ignore_compiler import compile_patterns


def find_last_match(patterns, path):
    """Returns the last pattern (in original order) that matches path, or None."""
    for pattern in reversed(patterns):
        if pattern.matcher(path):
            return pattern
    return None


def _is_ancestor_excluded(patterns, path):
    parent = path.rstrip("/")
    while "/" in parent:
        parent = parent[:parent.rindex("/")]
        if not parent:
            break
        parent_match = find_last_match(patterns, parent + "/")
        if parent_match is not None and not parent_match.is_negated:
            return True
    return False


def is_ignored(patterns, path):
    """
    Returns True if path is excluded by the compiled pattern list.

    path is relative to the scan root and uses '/' as separator; a directory
    may be passed with a trailing '/' so that directory-only rules apply.
    """
    last_match = find_last_match(patterns, path)
    if last_match is None:
        return False

    if not last_match.is_negated:
        return True

    return _is_ancestor_excluded(patterns, path)


def should_ignore(raw_patterns, path):
    """Same as is_ignored, but takes the raw pattern lines."""
    return is_ignored(compile_patterns(raw_patterns), path)


class Matcher:
    """
    Callable ignore check over filesystem paths under a base directory.

    Patterns are compiled once per instance, so a single Matcher can be reused
    for every entry of a directory walk.
    """
    def __init__(self, lines, base_dir):
        self.base_dir = Path(base_dir).resolve()
        self.patterns = compile_patterns(lines)

    def relative_query(self, path_to_check, is_dir=None):
        """Returns the '/'-separated query string for path, or None if outside base_dir."""
        path_to_check = Path(path_to_check)
        if not path_to_check.is_absolute():
            path_to_check = self.base_dir / path_to_check
        path_to_check = path_to_check.resolve()

        if path_to_check == self.base_dir:
            return None
        if self.base_dir not in path_to_check.parents:
            return None

        relative_path_posix = path_to_check.relative_to(self.base_dir).as_posix()
        if is_dir is None:
            is_dir = path_to_check.is_dir()
        if is_dir:
            relative_path_posix += "/"
        return relative_path_posix

    def __call__(self, path_to_check, is_dir=None):
        query = self.relative_query(path_to_check, is_dir)
        if query is None:
            return False
        return is_ignored(self.patterns, query)
