"""Bug id matchers used when folding bug metadata into commit messages.

Both patterns must have exactly one capture group holding the numeric
bug id. Swap them out to target a different tracker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .config import DEFAULT_BUG_URL_TEMPLATE

MESSAGE_BUG_PATTERN = r"[bB]ug\s+([0-9]+)"


@dataclass(frozen=True)
class BugPatterns:
    """Matchers for "bug already mentioned in message" and "bug URL in metadata"."""

    message: re.Pattern
    metadata: re.Pattern

    @classmethod
    def default(cls) -> BugPatterns:
        return cls.from_url_template(DEFAULT_BUG_URL_TEMPLATE)

    @classmethod
    def from_url_template(cls, template: str, message_pattern: str = MESSAGE_BUG_PATTERN) -> BugPatterns:
        """Build matchers from a tracker URL such as ``https://host/show_bug.cgi?id={id}``."""
        if template.count("{id}") != 1:
            raise ValueError(f"Bug URL template must contain {{id}} exactly once: {template}")
        prefix, suffix = template.split("{id}")
        metadata = re.escape(prefix) + "([0-9]+)" + re.escape(suffix)
        return cls(message=re.compile(message_pattern), metadata=re.compile(metadata))

    def ids_in_message(self, text: str) -> set[str]:
        return {match.group(1) for match in self.message.finditer(text)}

    def references_in_metadata(self, text: str) -> list[tuple[str, str]]:
        """Return ``(bug_id, matched_text)`` pairs in the order they appear."""
        return [(match.group(1), match.group(0)) for match in self.metadata.finditer(text)]
