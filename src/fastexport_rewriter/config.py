"""Defaults and run options for the rewriter."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BLOCK_SIZE = 1024  # bytes per chunk when copying raw blobs
DEFAULT_BUG_URL_TEMPLATE = "https://bugzilla.mozilla.org/show_bug.cgi?id={id}"

NEWLINES = {
    "platform": os.linesep,
    "lf": "\n",
    "crlf": "\r\n",
}


@dataclass
class RewriterConfig:
    """Options for a single rewrite run."""

    block_size: int = DEFAULT_BLOCK_SIZE
    newline: str = os.linesep

    def __post_init__(self):
        if self.block_size < 1:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
