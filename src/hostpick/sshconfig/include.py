"""Include directive resolution for SSH config files.

Follows OpenSSH semantics closely enough for alias precedence: patterns are
globbed relative to the including file, unmatched patterns are ignored, and
every file is visited at most once per traversal. Files are emitted in
depth-first pre-order, so a file's own includes directly follow it.
"""

import glob
import logging
import os
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """Result of resolving includes from a root config file."""

    paths: list[str] = field(default_factory=list)  # root excluded
    error: str | None = None


def expand_tilde(path: str, home: str) -> str:
    """Expand a leading ~ or ~/ to home. ~user is not supported."""
    if not path or path[0] != "~" or not home:
        return path
    if path == "~":
        return home
    if path.startswith("~/"):
        return os.path.join(home, path[2:])
    return path


def unquote(token: str) -> str:
    """Strip one pair of matching surrounding single or double quotes."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    return token


def strip_inline_comment(line: str) -> str:
    """Drop an unquoted '#' and everything after it."""
    in_single = False
    in_double = False
    for i, ch in enumerate(line):
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == "#" and not in_single and not in_double:
            return line[:i].strip()
    return line.strip()


def split_fields(line: str) -> list[str]:
    """Split on spaces and tabs outside quoted spans.

    Quote characters stay in the fields; callers unquote when they consume a
    field as a pattern.
    """
    fields = []
    current: list[str] = []
    in_single = False
    in_double = False

    for ch in line:
        if ch in (" ", "\t") and not in_single and not in_double:
            if current:
                fields.append("".join(current))
                current = []
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        current.append(ch)

    if current:
        fields.append("".join(current))
    return fields


def parse_include_patterns(line: str) -> list[str]:
    """Return the raw patterns of an Include line, or [] for any other line."""
    line = line.strip()
    if not line:
        return []
    line = strip_inline_comment(line)
    if not line or line.startswith("#"):
        return []

    fields = split_fields(line)
    if not fields or fields[0].lower() != "include":
        return []
    return fields[1:]


class IncludeResolver:
    """Resolve the transitive Include graph of an SSH config file."""

    def __init__(self, home: str | None = None):
        self.home = home if home is not None else os.path.expanduser("~")

    def absolute(self, path: str) -> str:
        """Tilde-expand and absolutize a path without following symlinks."""
        return os.path.abspath(expand_tilde(path, self.home))

    def resolve(self, root_path: str) -> ResolveResult:
        """Return every file reachable from root_path, in pre-order.

        The visited set is local to this call. Traversal uses an explicit
        stack of match generators rather than recursion; patterns are globbed
        only when reached, so the emission order is identical to a recursive
        walk that descends into each match as soon as it is found.
        """
        root = self.absolute(root_path)
        visited = {root}
        result = ResolveResult()

        stack: list[tuple[str, Iterator[str]]] = [(root, self._matches(root))]
        while stack:
            current, matches = stack[-1]
            try:
                child = next(matches)
            except StopIteration:
                stack.pop()
                continue
            except OSError as e:
                stack.pop()
                if current == root:
                    result.error = f"error scanning {current}: {e}"
                else:
                    logger.debug(f"Stopped scanning {current}: {e}")
                continue

            if child in visited:
                continue
            visited.add(child)
            result.paths.append(child)
            stack.append((child, self._matches(child)))

        return result

    def _matches(self, path: str) -> Iterator[str]:
        """Yield absolute paths matched by the Include lines of path.

        The file is read up front and closed before anything is yielded, so
        a deep include chain does not hold one open file per level. A read
        error is re-raised after the lines read before it are processed.
        """
        lines, error = _read_lines(path)

        base_dir = os.path.dirname(path)
        for line in lines:
            for raw in parse_include_patterns(line):
                pattern = unquote(raw.strip())
                if not pattern:
                    continue
                pattern = expand_tilde(pattern, self.home)
                if not os.path.isabs(pattern):
                    pattern = os.path.join(base_dir, pattern)

                for match in sorted(glob.glob(pattern)):
                    yield os.path.abspath(match)

        if error is not None:
            raise error


def open_config(path: str):
    """Open an SSH config file for reading.

    Bytes that are not valid UTF-8 are carried through as surrogates, so a
    stray Latin-1 comment does not make the rest of the file unreadable.
    """
    return open(path, encoding="utf-8", errors="surrogateescape")


def _read_lines(path: str) -> tuple[list[str], Exception | None]:
    try:
        f = open_config(path)
    except OSError:
        # An unreadable file simply has no includes
        return [], None

    lines = []
    with f:
        try:
            for line in f:
                lines.append(line)
        except OSError as e:
            return lines, e
    return lines, None
