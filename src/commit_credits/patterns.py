from __future__ import annotations

import re

# Contributor convention from the Subversion days: the committer put the name of
# the author between brackets at the end of the commit or changelog message:
#
#   Fix case-sensitive validates_uniqueness_of. Closes #11366 [miloops]
#
# Not robust, but it is the best signal there is.
TRAILING_BRACKET_RE = re.compile(r"\[([^\]]+)\]\s*$", re.MULTILINE)

# Marker git-svn leaves in the message of every commit it imports.
LEGACY_IMPORT_MARKER = "git-svn-id:"

DIFF_HEADER_RE = re.compile(r"^diff --git(.*)$", re.MULTILINE)
NEW_FILE_PREFIX = "+++"
CHANGELOG_BULLET_RE = re.compile(r"^\+\s*\*")
# CHANGELOG, activerecord/CHANGELOG, ChangeLog.txt, CHANGELOG.md; not changelog.rb or changelog.py
CHANGELOG_PATH_RE = re.compile(r"changelog(?:\.(?:md|markdown|txt|rdoc|rst))?$", re.IGNORECASE)


def extract_bracketed_name(text: str) -> list[str]:
    if not text:
        return []
    m = TRAILING_BRACKET_RE.search(text)
    return [m.group(1)] if m else []


def is_legacy_import(message: str | None) -> bool:
    return bool(message) and LEGACY_IMPORT_MARKER in message


def is_changelog_path(path: str) -> bool:
    return CHANGELOG_PATH_RE.search((path or "").strip()) is not None
