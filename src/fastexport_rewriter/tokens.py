"""Token classification for the fast-export command subset we understand."""

from __future__ import annotations

import re
from enum import Enum


class TokenKind(Enum):
    RESET = "reset"
    COMMIT = "commit"
    MARK = "mark"
    COMMITTER = "committer"
    AUTHOR = "author"
    FROM = "from"
    MERGE = "merge"
    DATA = "data"
    PROPERTY_BUGS = "property bugs"
    RENAME = "R"
    DELETE = "D"
    MODIFY_DIRECTORY = "M 040000"
    MODIFY = "M"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


DIRECTORY_MODE = "040000"

# Checked in order, so "M 040000" must come before "M ".
PREFIXES: list[tuple[str, TokenKind]] = [
    ("reset ", TokenKind.RESET),
    ("commit ", TokenKind.COMMIT),
    ("mark ", TokenKind.MARK),
    ("committer ", TokenKind.COMMITTER),
    ("author ", TokenKind.AUTHOR),
    ("from ", TokenKind.FROM),
    ("merge ", TokenKind.MERGE),
    ("data ", TokenKind.DATA),
    ("property bugs ", TokenKind.PROPERTY_BUGS),
    ("R ", TokenKind.RENAME),
    ("D ", TokenKind.DELETE),
    (f"M {DIRECTORY_MODE} ", TokenKind.MODIFY_DIRECTORY),
    ("M ", TokenKind.MODIFY),
]

IGNORED_PREFIXES = ("feature", "property branch-nick")

DATA_LENGTH_RE = re.compile(r"data ([0-9]+)")
BUGS_LENGTH_RE = re.compile(r"property bugs ([0-9]+) ?")
MODIFY_RE = re.compile(r"M \S+ \S+ (.*)")


def classify(token: str) -> TokenKind:
    """Return the kind of a token by its leading keyword."""
    if token == "" or token.startswith(IGNORED_PREFIXES):
        return TokenKind.IGNORED
    for prefix, kind in PREFIXES:
        if token.startswith(prefix):
            return kind
    return TokenKind.UNKNOWN


def data_length(token: str) -> int:
    """Payload length declared by a ``data <N>`` token, 0 when absent."""
    match = DATA_LENGTH_RE.match(token)
    return int(match.group(1)) if match else 0


def bugs_length(token: str) -> int:
    """Value length declared by a ``property bugs <N> ...`` token, 0 when absent."""
    match = BUGS_LENGTH_RE.match(token)
    return int(match.group(1)) if match else 0


def split_bugs_token(token: str) -> tuple[int, str]:
    """Split ``property bugs <N> <text>`` into the declared length and inline text."""
    match = BUGS_LENGTH_RE.match(token)
    if match is None:
        return 0, token[len("property bugs "):]
    return int(match.group(1)), token[match.end():]


def modify_path(token: str) -> str:
    """Path of an ``M <mode> <dataref> <path>`` token."""
    match = MODIFY_RE.match(token)
    if match:
        return match.group(1)
    return token.split(" ", 2)[-1]


def delete_path(token: str) -> str:
    return token[2:]


def rename_paths(token: str) -> tuple[str, str]:
    """Source and target of an ``R <source> <target>`` token.

    The source may be C-style quoted when it contains spaces; quotes are
    kept so the result compares equal to the path as it appeared in the
    stream.
    """
    rest = token[2:]
    if rest.startswith('"'):
        end = 1
        while end < len(rest):
            if rest[end] == "\\":
                end += 2
                continue
            if rest[end] == '"':
                break
            end += 1
        source = rest[: end + 1]
        return source, rest[end + 2:]
    source, _, target = rest.partition(" ")
    return source, target
