from __future__ import annotations

import json
from pathlib import Path

from .identity import DEFAULT_SPLIT_PATTERNS, CanonicalNames, SpecialCaseRule, SpecialCases

DEFAULT_CONFIG: dict = {
    "names_path": "names.json",
    "show_cache_dir": ".commit-credits/show",
}

NAMES_TEMPLATE: dict = {
    "aliases": {},
    "special_cases": [],
    "noise": [],
    "split_patterns": list(DEFAULT_SPLIT_PATTERNS),
}


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a JSON object")
    return data


def save_config(config_path: Path, config: dict) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def resolve_config_path(config_path: Path, value: str) -> Path | None:
    """Paths in config.json are relative to the directory holding config.json."""
    v = (value or "").strip()
    if not v:
        return None
    p = Path(v).expanduser()
    if not p.is_absolute():
        p = config_path.resolve().parent / p
    return p


def ensure_config_file(*, config_path: Path) -> dict:
    """
    Create `config_path` (and the names file it points at) from the defaults if
    missing, then re-load and return the config dict. Existing files are left alone.
    """
    if not config_path.exists():
        save_config(config_path, dict(DEFAULT_CONFIG))
    config = load_config(config_path)
    names_path = resolve_config_path(config_path, str(config.get("names_path", "") or ""))
    if names_path is not None and not names_path.exists():
        save_config(names_path, json.loads(json.dumps(NAMES_TEMPLATE)))
    return config


def _str_list(value: object, *, where: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{where}: expected a string or a list of strings")
    return list(value)


def names_from_dict(data: dict, *, source: str = "names") -> tuple[SpecialCases, CanonicalNames]:
    if not isinstance(data, dict):
        raise ValueError(f"{source}: expected a JSON object")

    aliases_raw = data.get("aliases") or {}
    if not isinstance(aliases_raw, dict):
        raise ValueError(f"{source}: 'aliases' must map canonical names to lists of aliases")
    aliases = {str(k): _str_list(v, where=f"{source}: aliases[{k!r}]") for k, v in aliases_raw.items()}

    rules: list[SpecialCaseRule] = []
    rules_raw = data.get("special_cases") or []
    if not isinstance(rules_raw, list):
        raise ValueError(f"{source}: 'special_cases' must be a list")
    for i, r in enumerate(rules_raw):
        where = f"{source}: special_cases[{i}]"
        if not isinstance(r, dict) or not isinstance(r.get("name"), str) or not r.get("name"):
            raise ValueError(f"{where}: expected an object with a non-empty 'name'")
        rules.append(
            SpecialCaseRule(
                name=r["name"],
                names=tuple(_str_list(r.get("names"), where=f"{where}.names")),
                authors=tuple(_str_list(r.get("authors"), where=f"{where}.authors")),
            )
        )

    noise = _str_list(data.get("noise"), where=f"{source}: noise")
    if "split_patterns" in data:
        split_patterns = tuple(_str_list(data.get("split_patterns"), where=f"{source}: split_patterns"))
    else:
        split_patterns = DEFAULT_SPLIT_PATTERNS

    try:
        special = SpecialCases(rules=tuple(rules), noise=frozenset(noise), split_patterns=split_patterns)
        canonical = CanonicalNames.from_aliases(aliases)
    except ValueError as e:
        raise ValueError(f"{source}: {e}") from e
    return special, canonical


def load_names(names_path: Path | None) -> tuple[SpecialCases, CanonicalNames]:
    """Lookups from a names file; a missing file gives the default rules and no aliases."""
    if names_path is None or not names_path.exists():
        return SpecialCases(), CanonicalNames()
    data = json.loads(names_path.read_text(encoding="utf-8"))
    return names_from_dict(data, source=str(names_path))
