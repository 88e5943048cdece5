from __future__ import annotations

from .changelog import extract_changelog, only_modifies_changelogs
from .identity import NameLookup, RuleLookup
from .models import Commit, DiffProvider
from .patterns import extract_bracketed_name


def extract_contributor_names(
    commit: Commit,
    diff_provider: DiffProvider,
    rules: RuleLookup,
    lookup: NameLookup,
) -> list[str]:
    """
    Canonical contributor names of `commit`, without duplicates, in order of
    first appearance. Never empty as long as the commit has an author.

    `DiffUnavailable` from `diff_provider` propagates and leaves `commit.git_show` unset.
    """
    names = extract_candidates(commit, diff_provider)
    names = handle_special_cases(names, commit.author, rules)
    if not names and commit.author:
        # Every candidate was suppressed; the author is still responsible for the commit.
        names = [commit.author]
    names = canonicalize(names, lookup)
    return list(dict.fromkeys(names))


def extract_candidates(commit: Commit, diff_provider: DiffProvider) -> list[str]:
    # Both svn and git commits may carry the [...] convention in the message. If
    # it is missing we look at the changelog entries of svn imports, and if that
    # fails too the git author is the contributor by definition.
    names = extract_bracketed_name(commit.message)
    if not names and commit.imported_from_svn:
        names = extract_svn_contributor_names_diffing(commit, diff_provider)
    if not names:
        names = [commit.author]
    return names


def extract_svn_contributor_names_diffing(commit: Commit, diff_provider: DiffProvider) -> list[str]:
    git_show = commit.diff_text(diff_provider)
    if only_modifies_changelogs(git_show):
        return []
    names: list[str] = []
    for line in extract_changelog(git_show).split("\n"):
        names.extend(extract_bracketed_name(line))
    return names


def handle_special_cases(names: list[str], author: str, rules: RuleLookup) -> list[str]:
    out: list[str] = []
    for name in names:
        for replacement in rules.handle_special_case(name, author) or []:
            if replacement:
                out.append(replacement)
    return out


def canonicalize(names: list[str], lookup: NameLookup) -> list[str]:
    return [lookup.canonical_name_for(name) for name in names]
