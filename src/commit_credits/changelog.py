from __future__ import annotations

import io

from .patterns import CHANGELOG_BULLET_RE, DIFF_HEADER_RE, NEW_FILE_PREFIX, is_changelog_path


def only_modifies_changelogs(diff_text: str) -> bool:
    """
    True when every `diff --git` header of `diff_text` points at a changelog.

    Some svn commits only touch CHANGELOGs (moving entries around, fixing typos).
    Those are not mined for names.
    """
    for m in DIFF_HEADER_RE.finditer(diff_text or ""):
        if not is_changelog_path(m.group(1)):
            return False
    return True


def extract_changelog(diff_text: str) -> str:
    """
    Collect the added bullet lines (`+  * ...`) of every changelog hunk in a
    `git show` output, verbatim and in order.
    """
    out: list[str] = []
    in_changelog = False
    for line in io.StringIO(diff_text or ""):
        bare = line.rstrip("\r\n")
        # A file header must reset the flag before the `+++` line can set it again.
        if bare.startswith("diff --git"):
            in_changelog = False
        elif bare.startswith(NEW_FILE_PREFIX) and is_changelog_path(bare[len(NEW_FILE_PREFIX) :]):
            in_changelog = True
        elif in_changelog and CHANGELOG_BULLET_RE.match(bare):
            out.append(line)
    return "".join(out)
