"""Driver loop: read a fast-export stream, write a fast-import stream.

Tokens are dispatched by kind. Commit-level tokens go to the commit
accumulator; file modifications and raw blob data outside a commit are
copied straight to the output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Callable

from .blocks import BlockReader, BlockWriter, byte_length, decode
from .bugs import BugPatterns
from .commit import CommitAccumulator
from .config import RewriterConfig
from .directories import KnownDirectories
from .errors import UnexpectedDataError
from .tokens import TokenKind, classify, data_length, modify_path, split_bugs_token


@dataclass
class RewriteStats:
    """Counters for one rewrite run."""

    commits: int = 0
    resets: int = 0
    blobs: int = 0
    blob_bytes: int = 0
    bug_references_added: int = 0
    directory_ops_suppressed: int = 0
    skipped_tokens: int = 0

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)


class FastImportRewriter:
    """Rewrites one fast-export stream into a fast-import stream."""

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        config: RewriterConfig | None = None,
        patterns: BugPatterns | None = None,
        warn: Callable[[str], None] | None = None,
        directories: KnownDirectories | None = None,
    ):
        self.config = config or RewriterConfig()
        self.reader = BlockReader(source)
        self.writer = BlockWriter(sink, newline=self.config.newline)
        self.directories = directories if directories is not None else KnownDirectories()
        self.stats = RewriteStats()
        self._warn = warn or (lambda message: None)
        self.accumulator = CommitAccumulator(
            self.writer,
            self.directories,
            patterns=patterns,
            warn=self._skip,
        )
        self._handlers: dict[TokenKind, Callable[[str], None]] = {
            TokenKind.RESET: self._handle_reset,
            TokenKind.COMMIT: self._handle_commit,
            TokenKind.MARK: self.accumulator.set_mark,
            TokenKind.COMMITTER: self.accumulator.set_committer,
            TokenKind.AUTHOR: self.accumulator.set_author,
            TokenKind.FROM: self.accumulator.set_from,
            TokenKind.MERGE: self.accumulator.set_merge,
            TokenKind.DATA: self._handle_data,
            TokenKind.PROPERTY_BUGS: self._handle_bugs,
            TokenKind.RENAME: self.accumulator.add_rename,
            TokenKind.DELETE: self.accumulator.add_delete,
            TokenKind.MODIFY_DIRECTORY: self._handle_directory,
            TokenKind.MODIFY: self._handle_modify,
            TokenKind.IGNORED: lambda token: None,
            TokenKind.UNKNOWN: self._handle_unknown,
        }

    def run(self) -> RewriteStats:
        """Process the whole input. Any live commit is flushed at end of stream."""
        while True:
            token = self.reader.read_token()
            if token is None:
                break
            self._handlers[classify(token)](token)

        self._flush_pending()
        self.stats.directory_ops_suppressed = self.accumulator.suppressed_directory_ops
        self.writer.flush()
        return self.stats

    def _skip(self, message: str) -> None:
        self.stats.skipped_tokens += 1
        self._warn(message)

    def _flush_pending(self) -> None:
        self.stats.bug_references_added += self.accumulator.finalize_and_flush()

    # --- Handlers ---

    def _handle_reset(self, token: str) -> None:
        self.stats.bug_references_added += self.accumulator.begin_reset(token)
        self.stats.resets += 1

    def _handle_commit(self, token: str) -> None:
        self.stats.bug_references_added += self.accumulator.begin_commit(token)
        self.stats.commits += 1

    def _handle_data(self, token: str) -> None:
        size = data_length(token)
        if self.accumulator.is_active:
            # Refuse before the payload is consumed.
            if self.accumulator.has_message:
                raise UnexpectedDataError(token, self.accumulator.pending.ref_line)
            self.accumulator.set_message(self.reader.read_bytes(size), token)
            return
        self._copy_blob(token, size)

    def _copy_blob(self, token: str, size: int) -> None:
        self.writer.write_line(token)
        for chunk in self.reader.iter_chunks(size, self.config.block_size):
            self.writer.write(chunk)
        self.writer.write_line()
        self.stats.blobs += 1
        self.stats.blob_bytes += size

    def _handle_bugs(self, token: str) -> None:
        length, text = split_bugs_token(token)
        inline = byte_length(text)
        if inline < length:
            text += "\n" + decode(self.reader.read_bytes(length - inline))
        self.accumulator.set_bug_metadata(text, token)

    def _handle_directory(self, token: str) -> None:
        self.directories.add(modify_path(token))

    def _handle_modify(self, token: str) -> None:
        # A file modification ends the commit header.
        self._flush_pending()
        self.writer.write_line(token)

    def _handle_unknown(self, token: str) -> None:
        self._skip(f"Skipping: {token}")


def rewrite_stream(
    source: BinaryIO,
    sink: BinaryIO,
    config: RewriterConfig | None = None,
    patterns: BugPatterns | None = None,
    warn: Callable[[str], None] | None = None,
) -> RewriteStats:
    """Rewrite ``source`` into ``sink`` and return the run statistics."""
    return FastImportRewriter(source, sink, config=config, patterns=patterns, warn=warn).run()
