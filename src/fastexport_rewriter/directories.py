"""Directories seen so far in the stream.

git has no explicit directories, so renames and deletes of a directory
must not reach the output. Owned by the driver and shared with the
commit accumulator.
"""

from __future__ import annotations


class KnownDirectories:
    def __init__(self, paths=None):
        self._paths: set[str] = set(paths or ())

    def add(self, path: str) -> None:
        self._paths.add(path)

    def clear(self) -> None:
        self._paths.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)
