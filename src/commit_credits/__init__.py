from __future__ import annotations

from .changelog import extract_changelog, only_modifies_changelogs
from .extract import extract_contributor_names
from .git import DiffUnavailable
from .patterns import extract_bracketed_name

__all__ = [
    "DiffUnavailable",
    "extract_bracketed_name",
    "extract_changelog",
    "extract_contributor_names",
    "only_modifies_changelogs",
]
