# file_collector/ignore_compiler.py
"""
Compiles gitignore-style pattern lines into matchers.

Each non-blank, non-comment line becomes a CompiledPattern whose matcher is a
predicate over a '/'-separated path relative to the scan root.
"""
import re
from collections import namedtuple

CompiledPattern = namedtuple(
    "CompiledPattern", ["original_text", "body", "is_negated", "matcher"]
)

# Characters that lose their special meaning when preceded by a backslash.
ESCAPABLE_CHARS = "!#*? "

ANY_DEPTH_PREFIX = "(?:.*/)?"
ZERO_OR_MORE_SEGMENTS = "/(?:.*/)?"
NESTED_SUFFIX = "(?:/.*)?"
NEVER_MATCHES = "(?!)"


class RegexMatcher:
    """Predicate over a relative path, backed by a compiled regular expression."""

    __slots__ = ("regex",)

    def __init__(self, regex):
        self.regex = regex

    def __call__(self, path):
        return self.regex.search(path) is not None

    def __repr__(self):
        return f"RegexMatcher({self.regex.pattern!r})"


def _translate_wildcards(text):
    """Translates a pattern body (no anchor, no trailing slash) into regex source."""
    parts = []
    i = 0
    n = len(text)

    if text.startswith("**/"):
        parts.append(ANY_DEPTH_PREFIX)
        i = 3

    while i < n:
        char = text[i]
        if char == "\\" and i + 1 < n and text[i + 1] in ESCAPABLE_CHARS:
            parts.append(re.escape(text[i + 1]))
            i += 2
            continue
        if text.startswith("/**/", i):
            parts.append(ZERO_OR_MORE_SEGMENTS)
            i += 4
            continue
        if text.startswith("/**", i) and i + 3 == n:
            parts.append(NESTED_SUFFIX)
            i += 3
            continue

        if char == "*":
            # A run of stars is one wildcard; stacked [^/]* groups backtrack badly.
            while i + 1 < n and text[i + 1] == "*":
                i += 1
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        i += 1

    return "".join(parts)


def _is_anchored(body):
    rest = body[3:] if body.startswith("**/") else body
    return "/" in rest


def build_regex_source(body):
    """Returns the full regular expression source for a pattern body."""
    if not body:
        return NEVER_MATCHES

    anchored = _is_anchored(body)
    dir_only = body.endswith("/")

    text = body
    if dir_only:
        text = text[:-1]
    if anchored and text.startswith("/"):
        text = text[1:]

    regex_source = _translate_wildcards(text)
    regex_source = ("^" if anchored else "(?:^|/)") + regex_source

    if dir_only:
        # Directory queries carry a trailing separator, flat files do not.
        regex_source += "/.*$"
    else:
        regex_source += NESTED_SUFFIX + "$"
    return regex_source


def compile_pattern(raw):
    """
    Compiles one raw pattern line.

    Returns None for blank lines and comments. Never raises: unusual input
    degrades to literal matching.
    """
    pattern = raw.strip()
    if not pattern or pattern.startswith("#"):
        return None

    is_negated = pattern.startswith("!")
    if is_negated:
        pattern = pattern[1:]

    if pattern.startswith("\\!"):
        pattern = pattern[1:]

    matcher = RegexMatcher(re.compile(build_regex_source(pattern)))
    return CompiledPattern(
        original_text=raw,
        body=pattern,
        is_negated=is_negated,
        matcher=matcher,
    )


def compile_patterns(raw_patterns):
    """Compiles a whole ordered list, dropping blank lines and comments."""
    compiled = []
    for raw in raw_patterns:
        compiled_pattern = compile_pattern(raw)
        if compiled_pattern is not None:
            compiled.append(compiled_pattern)
    return compiled
