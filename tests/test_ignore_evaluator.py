"""Tests for last-match-wins evaluation and negation re-inclusion."""

from pathlib import Path

import pytest

from file_collector.ignore_compiler import compile_patterns
from file_collector.ignore_evaluator import Matcher, find_last_match, is_ignored, should_ignore


def test_no_patterns_ignores_nothing():
    assert is_ignored([], "anything.txt") is False


def test_plain_name_matches_at_every_level():
    patterns = compile_patterns(["node_modules"])
    assert is_ignored(patterns, "node_modules")
    assert is_ignored(patterns, "src/node_modules")
    assert is_ignored(patterns, "src/node_modules/index.js")
    assert not is_ignored(patterns, "node_modules_backup")


def test_directory_only_pattern_skips_flat_file():
    patterns = compile_patterns(["build/"])
    assert is_ignored(patterns, "build/")
    assert is_ignored(patterns, "build/app.bin")
    assert is_ignored(patterns, "build/sub/app.bin")
    assert not is_ignored(patterns, "build")


def test_later_negation_re_includes_file():
    patterns = compile_patterns(["*.log", "!important.log"])
    assert is_ignored(patterns, "important.log") is False
    assert is_ignored(patterns, "debug.log") is True


def test_order_matters():
    patterns = compile_patterns(["!important.log", "*.log"])
    assert is_ignored(patterns, "important.log") is True


def test_negation_inside_excluded_directory_does_not_resurrect():
    patterns = compile_patterns(["logs/", "!logs/keep.txt"])
    assert is_ignored(patterns, "logs/keep.txt") is True
    assert is_ignored(patterns, "logs/other.txt") is True


def test_negation_succeeds_when_directory_itself_is_not_excluded():
    patterns = compile_patterns(["logs/*.txt", "!logs/keep.txt"])
    assert is_ignored(patterns, "logs/keep.txt") is False
    assert is_ignored(patterns, "logs/other.txt") is True


def test_star_after_directory_also_matches_the_directory_query():
    # "logs/*" accepts "logs/" (empty star), so the ancestor counts as excluded.
    patterns = compile_patterns(["logs/*", "!logs/keep.txt"])
    assert is_ignored(patterns, "logs/keep.txt") is True


def test_negated_ancestor_does_not_block_negation():
    patterns = compile_patterns(["*.txt", "!docs/", "!docs/readme.txt"])
    assert is_ignored(patterns, "docs/readme.txt") is False


def test_excluded_grandparent_still_blocks_negation():
    patterns = compile_patterns(["vendor/", "!vendor/lib/", "!vendor/lib/a.js"])
    # vendor/lib/ is re-included by its own rule but vendor/ is still excluded.
    assert is_ignored(patterns, "vendor/lib/a.js") is True


def test_negated_directory_query_is_not_its_own_ancestor():
    patterns = compile_patterns(["*", "!src/"])
    assert is_ignored(patterns, "src/") is False


def test_double_star_prefix_matches_uniformly():
    patterns = compile_patterns(["**/*.tmp"])
    for path in ["a.tmp", "x/a.tmp", "x/y/a.tmp"]:
        assert is_ignored(patterns, path)


def test_double_star_middle():
    patterns = compile_patterns(["a/**/b"])
    assert is_ignored(patterns, "a/b")
    assert is_ignored(patterns, "a/x/b")
    assert is_ignored(patterns, "a/x/y/b")
    assert not is_ignored(patterns, "ab")


@pytest.mark.parametrize("path", ["debug.log", "keep.log", "src/app.py", "notes/#x", "logs/a"])
def test_blank_and_comment_lines_have_no_effect(path):
    plain = ["*.log", "!keep.log", "logs/"]
    noisy = ["", "# leading", "*.log", "   ", "!keep.log", "#!logs/", "logs/", "# trailing"]
    assert is_ignored(compile_patterns(plain), path) == is_ignored(compile_patterns(noisy), path)


def test_compiling_twice_gives_identical_decisions():
    raw = ["*.log", "!important.log", "build/", "a/**/b", "**/*.tmp", "\\#literal"]
    first, second = compile_patterns(raw), compile_patterns(raw)
    for path in ["important.log", "x.log", "build/", "build", "a/q/b", "z/y.tmp", "#literal"]:
        assert is_ignored(first, path) == is_ignored(second, path)


def test_find_last_match_returns_latest_rule():
    patterns = compile_patterns(["*.log", "debug.*", "!nothing"])
    assert find_last_match(patterns, "debug.log").body == "debug.*"
    assert find_last_match(patterns, "readme.md") is None


def test_should_ignore_takes_raw_lines():
    assert should_ignore(["# comment", "*.bak"], "old/file.bak") is True
    assert should_ignore(["*.bak", "!file.bak"], "file.bak") is False


def test_matcher_over_filesystem_paths(tmp_path: Path):
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.o").write_text("x")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("print()")
    (tmp_path / "notes.log").write_text("log")

    matcher = Matcher(["build/", "*.log"], tmp_path)
    assert matcher(tmp_path / "build") is True
    assert matcher(tmp_path / "build" / "out.o") is True
    assert matcher(tmp_path / "notes.log") is True
    assert matcher(tmp_path / "src" / "main.py") is False


def test_matcher_flat_file_named_like_directory_rule(tmp_path: Path):
    (tmp_path / "build").write_text("not a directory")
    matcher = Matcher(["build/"], tmp_path)
    assert matcher(tmp_path / "build") is False


def test_matcher_accepts_relative_paths_and_explicit_kind(tmp_path: Path):
    matcher = Matcher(["cache/"], tmp_path)
    assert matcher("cache", is_dir=True) is True
    assert matcher("cache", is_dir=False) is False


def test_matcher_never_ignores_root_or_outside_paths(tmp_path: Path):
    matcher = Matcher(["*"], tmp_path / "project")
    (tmp_path / "project").mkdir()
    assert matcher(tmp_path / "project") is False
    assert matcher(tmp_path / "elsewhere.txt") is False
