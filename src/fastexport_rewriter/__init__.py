"""Rewrite bzr fast-export streams into git fast-import streams with bug references."""

__version__ = "0.1.0"
