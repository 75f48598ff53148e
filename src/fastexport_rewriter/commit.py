"""Per-commit buffering and message rewriting.

A reset or commit record collects its fields as tokens arrive, then is
written out in fast-import order with its message rewritten to mention
the bugs listed in the commit's ``property bugs`` metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .blocks import BlockWriter, byte_length, decode
from .bugs import BugPatterns
from .directories import KnownDirectories
from .errors import NoActiveRecordError, UnexpectedDataError
from .tokens import delete_path, rename_paths


class RecordKind(Enum):
    RESET = "reset"
    COMMIT = "commit"


@dataclass
class PendingCommit:
    """A reset or commit whose fields are still being collected."""

    kind: RecordKind
    ref_line: str
    mark_line: str | None = None
    committer_line: str | None = None
    author_line: str | None = None
    from_line: str | None = None
    merge_line: str | None = None
    original_message: str | None = None
    bug_metadata: str | None = None
    renames: list[str] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)
    rewritten_message: str | None = None
    appended_references: list[str] = field(default_factory=list)

    def rewrite_message(self, patterns: BugPatterns) -> str | None:
        """Build the ``data <len>`` record for the message, adding missing bug references.

        References already mentioned in the message ("Bug 1234") are not
        repeated. Returns None when the record has no message.
        """
        if self.original_message is None:
            return None

        message = self.original_message
        self.appended_references = []
        if self.bug_metadata is not None:
            mentioned = patterns.ids_in_message(message)
            addendum = ""
            for bug_id, reference in patterns.references_in_metadata(self.bug_metadata):
                if bug_id in mentioned:
                    continue
                if not addendum and not message.endswith("\n"):
                    addendum = "\n"
                addendum += "\n" + reference
                self.appended_references.append(reference)
            message += addendum

        self.rewritten_message = f"data {byte_length(message)}\n{message}"
        return self.rewritten_message

    def reset_line(self) -> str:
        """The reset line with spaces in the ref name replaced by underscores."""
        keyword, _, ref = self.ref_line.partition(" ")
        return f"{keyword} {ref.replace(' ', '_')}"

    def lines(self) -> list[str]:
        """Output lines in fast-import order. Call after rewrite_message()."""
        if self.kind is RecordKind.RESET:
            lines = [self.reset_line()]
            if self.from_line is not None:
                lines.append(self.from_line)
            lines.append("")
            return lines

        lines = [self.ref_line]
        if self.mark_line is not None:
            lines.append(self.mark_line)
        if self.author_line is not None:
            lines.append(self.author_line)
        if self.committer_line is not None:
            lines.append(self.committer_line)
        if self.rewritten_message is not None:
            lines.append(self.rewritten_message)
        if self.from_line is not None:
            lines.append(self.from_line)
        if self.merge_line is not None:
            lines.append(self.merge_line)
        lines.extend(self.renames)
        lines.extend(self.deletes)
        return lines


class CommitAccumulator:
    """Owns the single live record and flushes it to the output."""

    def __init__(
        self,
        writer: BlockWriter,
        directories: KnownDirectories,
        patterns: BugPatterns | None = None,
        warn=None,
    ):
        self.writer = writer
        self.directories = directories
        self.patterns = patterns or BugPatterns.default()
        self.warn = warn or (lambda message: None)
        self.pending: PendingCommit | None = None
        self.suppressed_directory_ops = 0

    @property
    def is_active(self) -> bool:
        return self.pending is not None

    @property
    def has_message(self) -> bool:
        return self.pending is not None and self.pending.original_message is not None

    def _require(self, token: str) -> PendingCommit:
        if self.pending is None:
            raise NoActiveRecordError(token)
        return self.pending

    # --- Record boundaries ---

    def begin_reset(self, token: str) -> int:
        appended = self.finalize_and_flush()
        self.pending = PendingCommit(kind=RecordKind.RESET, ref_line=token)
        return appended

    def begin_commit(self, token: str) -> int:
        appended = self.finalize_and_flush()
        self.pending = PendingCommit(kind=RecordKind.COMMIT, ref_line=token)
        return appended

    def finalize_and_flush(self) -> int:
        """Write the live record, if any, and discard it.

        Returns the number of bug references appended to its message.
        """
        record = self.pending
        if record is None:
            return 0
        record.rewrite_message(self.patterns)
        for line in record.lines():
            self.writer.write_line(line)
        self.pending = None
        return len(record.appended_references)

    # --- Fields; the first value wins ---

    def set_mark(self, token: str) -> None:
        record = self._require(token)
        if record.mark_line is None:
            record.mark_line = token

    def set_committer(self, token: str) -> None:
        record = self._require(token)
        if record.committer_line is None:
            record.committer_line = token

    def set_author(self, token: str) -> None:
        record = self._require(token)
        if record.author_line is None:
            record.author_line = token

    def set_from(self, token: str) -> None:
        record = self._require(token)
        if record.from_line is None:
            record.from_line = token

    def set_merge(self, token: str) -> None:
        record = self._require(token)
        if record.merge_line is None:
            record.merge_line = token

    def set_message(self, raw: bytes, token: str = "data") -> None:
        record = self._require(token)
        if record.original_message is not None:
            raise UnexpectedDataError(token, record.ref_line)
        record.original_message = decode(raw)

    def set_bug_metadata(self, text: str, token: str = "property bugs") -> None:
        record = self._require(token)
        if record.bug_metadata is None:
            record.bug_metadata = text
        else:
            record.bug_metadata += "\n" + text

    # --- File changes ---

    def add_rename(self, token: str) -> bool:
        """Buffer a file rename. Returns False when the token was suppressed."""
        source, target = rename_paths(token)
        if source in self.directories:
            self.directories.add(target)
            self.suppressed_directory_ops += 1
            return False
        record = self._require(token)
        if record.kind is RecordKind.RESET:
            self.warn(f"Skipping: {token}")
            return False
        record.renames.append(token)
        return True

    def add_delete(self, token: str) -> bool:
        """Buffer a file delete. Returns False when the token was suppressed."""
        if delete_path(token) in self.directories:
            self.suppressed_directory_ops += 1
            return False
        record = self._require(token)
        if record.kind is RecordKind.RESET:
            self.warn(f"Skipping: {token}")
            return False
        record.deletes.append(token)
        return True
