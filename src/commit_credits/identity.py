from __future__ import annotations

import dataclasses
import fnmatch
import re
from typing import Protocol

DEFAULT_SPLIT_PATTERNS: tuple[str, ...] = (r"\s+and\s+", r"\s*&\s*", r"\s*,\s*")


class RuleLookup(Protocol):
    def handle_special_case(self, name: str, author: str) -> list[str]: ...


class NameLookup(Protocol):
    def canonical_name_for(self, name: str) -> str: ...


def normalize_name(name: str) -> str:
    return " ".join(name.split()).casefold()


@dataclasses.dataclass(frozen=True)
class SpecialCaseRule:
    """
    Replace a candidate `name` with `names` (possibly none, possibly several).

    `name` and `authors` are fnmatch patterns compared against normalized text,
    so plain names match case-insensitively. An empty `authors` applies the rule
    to every commit.
    """

    name: str
    names: tuple[str, ...] = ()
    authors: tuple[str, ...] = ()

    def matches(self, candidate: str, author: str) -> bool:
        if not fnmatch.fnmatchcase(normalize_name(candidate), normalize_name(self.name)):
            return False
        if not self.authors:
            return True
        a = normalize_name(author or "")
        return any(fnmatch.fnmatchcase(a, normalize_name(pat)) for pat in self.authors)


@dataclasses.dataclass(frozen=True)
class SpecialCases:
    rules: tuple[SpecialCaseRule, ...] = ()
    noise: frozenset[str] = frozenset()
    split_patterns: tuple[str, ...] = DEFAULT_SPLIT_PATTERNS
    _split_re: re.Pattern[str] | None = dataclasses.field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "noise", frozenset(normalize_name(n) for n in self.noise))
        if not self.split_patterns:
            return
        try:
            split_re = re.compile("|".join(f"(?:{p})" for p in self.split_patterns))
        except re.error as e:
            raise ValueError(f"invalid split pattern in {self.split_patterns!r}: {e}") from e
        object.__setattr__(self, "_split_re", split_re)

    def _rule_for(self, name: str, author: str) -> SpecialCaseRule | None:
        for rule in self.rules:
            if rule.matches(name, author):
                return rule
        return None

    def _resolve_one(self, name: str, author: str) -> list[str] | None:
        """Noise and explicit rules; None when neither applies."""
        if normalize_name(name) in self.noise:
            return []
        rule = self._rule_for(name, author)
        if rule is not None:
            return [n for n in rule.names if n]
        return None

    def handle_special_case(self, name: str, author: str) -> list[str]:
        name = (name or "").strip()
        if not name:
            return []
        resolved = self._resolve_one(name, author)
        if resolved is not None:
            return resolved
        if self._split_re is None:
            return [name]

        out: list[str] = []
        for part in self._split_re.split(name):
            part = (part or "").strip()
            if not part:
                continue
            resolved = self._resolve_one(part, author)
            out.extend([part] if resolved is None else resolved)
        return out


@dataclasses.dataclass(frozen=True)
class CanonicalNames:
    """
    Alias table: every alias (and every canonical name) maps to its canonical name.

    Exact spelling is tried first, then a case/whitespace-insensitive match.
    Unknown names come back unchanged.
    """

    exact: dict[str, str] = dataclasses.field(default_factory=dict)
    folded: dict[str, str] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_aliases(cls, aliases: dict[str, list[str]]) -> CanonicalNames:
        exact: dict[str, str] = {}
        folded: dict[str, str] = {}
        for canonical in aliases:
            exact[canonical] = canonical
        for canonical, names in aliases.items():
            for alias in names:
                if alias == canonical:
                    continue
                prev = exact.get(alias)
                if prev is not None and prev != canonical:
                    if prev == alias:
                        raise ValueError(f"alias {alias!r} of {canonical!r} is itself a canonical name")
                    raise ValueError(f"alias {alias!r} listed under both {prev!r} and {canonical!r}")
                exact[alias] = canonical
                folded.setdefault(normalize_name(alias), canonical)
        # Canonical spellings win the case-insensitive lookup so re-canonicalizing is a no-op.
        for canonical in aliases:
            folded[normalize_name(canonical)] = canonical
        return cls(exact=exact, folded=folded)

    def canonical_name_for(self, name: str) -> str:
        hit = self.exact.get(name)
        if hit is not None:
            return hit
        return self.folded.get(normalize_name(name), name)
