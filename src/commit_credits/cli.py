from __future__ import annotations

import argparse
import json
import os
import sys
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .config import ensure_config_file, load_config, load_names, resolve_config_path
from .extract import extract_contributor_names
from .git import DiffUnavailable, GitShowProvider, get_remote_origin, get_repo_toplevel, list_commits, web_base_for_remote
from .identity import CanonicalNames, SpecialCases
from .models import Commit, ContributorCount, DiffProvider
from .show_cache import CachedDiffProvider, ShowCache


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Credit the real contributors of git commits.")
    parser.add_argument("--repo", type=Path, default=Path("."), help="Path to the git repository.")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    parser.add_argument("--names", type=Path, default=None, help="Names file with aliases and special cases (overrides `names_path`).")
    parser.add_argument("--rev", type=str, default="HEAD", help="Revision or range to walk (e.g. v1.0..main).")
    parser.add_argument("--since", type=str, default="", help="Only commits more recent than this date.")
    parser.add_argument("--max-count", type=int, default=0, help="Limit number of commits (0 = no limit).")
    parser.add_argument("--include-merges", action="store_true", help="Include merge commits.")
    parser.add_argument(
        "--cache-dir",
        type=str,
        default=None,
        help="Where to keep `git show` output (overrides `show_cache_dir`; empty string disables the cache).",
    )
    parser.add_argument("--jobs", type=int, default=max(1, min(8, (os.cpu_count() or 4))), help="Parallel git jobs.")
    parser.add_argument("--summary", action="store_true", help="Print commit counts per contributor instead of per-commit names.")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format.")
    parser.add_argument("--verbose", action="store_true", help="Report progress on stderr.")
    return parser


def _diff_provider(repo: Path, config_path: Path, config: dict, cache_dir_arg: str | None) -> DiffProvider:
    provider: DiffProvider = GitShowProvider(repo)
    if cache_dir_arg is not None:
        cache_dir = Path(cache_dir_arg).expanduser() if cache_dir_arg.strip() else None
    else:
        cache_dir = resolve_config_path(config_path, str(config.get("show_cache_dir", "") or ""))
    if cache_dir is None:
        return provider
    return CachedDiffProvider(provider, ShowCache(cache_dir))


def resolve_commits(
    commits: list[Commit],
    *,
    diff_provider: DiffProvider,
    rules: SpecialCases,
    lookup: CanonicalNames,
    jobs: int = 1,
    verbose: bool = False,
) -> list[list[str]]:
    """Names per commit, in the order of `commits`."""
    results: list[list[str]] = [[] for _ in commits]
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = {ex.submit(extract_contributor_names, c, diff_provider, rules, lookup): i for i, c in enumerate(commits)}
        for n, fut in enumerate(as_completed(futs), start=1):
            results[futs[fut]] = fut.result()
            if verbose and (n % 100 == 0 or n == len(futs)):
                print(f"Resolved {n}/{len(futs)} commits...", file=sys.stderr)
    return results


def summarize(names_per_commit: list[list[str]]) -> list[ContributorCount]:
    counter: Counter[str] = Counter()
    for names in names_per_commit:
        counter.update(names)
    items = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return [ContributorCount(name=k, commits=v) for k, v in items]


def _print_results(commits: list[Commit], names_per_commit: list[list[str]], *, fmt: str, summary: bool, web_base: str) -> None:
    if summary:
        counts = summarize(names_per_commit)
        if fmt == "json":
            print(json.dumps([{"name": c.name, "commits": c.commits} for c in counts], indent=2))
            return
        for c in counts:
            print(f"{c.commits}\t{c.name}")
        return

    if fmt == "json":
        rows: list[dict[str, object]] = []
        for c, names in zip(commits, names_per_commit):
            row: dict[str, object] = {
                "sha1": c.sha1,
                "author": c.author,
                "names": names,
                "imported_from_svn": bool(c.imported_from_svn),
            }
            if web_base:
                row["url"] = c.web_url(web_base)
            rows.append(row)
        print(json.dumps(rows, indent=2, ensure_ascii=False))
        return
    for c, names in zip(commits, names_per_commit):
        print(f"{c.short_sha1()}\t{', '.join(names)}\t{c.short_message or ''}")


def run_init(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="commit-credits init", description="Write config.json and an empty names file if missing.")
    p.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    args = p.parse_args(argv)
    config = ensure_config_file(config_path=args.config)
    print(f"Config: {args.config}")
    names_path = resolve_config_path(args.config, str(config.get("names_path", "") or ""))
    if names_path is not None:
        print(f"Names file: {names_path}")
    return 0


def run(args: argparse.Namespace) -> int:
    repo = get_repo_toplevel(args.repo.resolve())
    if repo is None:
        print(f"error: not a git repository: {args.repo}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
        if args.names is not None:
            if not args.names.exists():
                print(f"error: names file not found: {args.names}", file=sys.stderr)
                return 1
            names_path: Path | None = args.names
        else:
            names_path = resolve_config_path(args.config, str(config.get("names_path", "") or ""))
        rules, lookup = load_names(names_path)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        commits = list_commits(
            repo,
            rev=args.rev,
            since=args.since,
            max_count=max(0, int(args.max_count)),
            include_merges=bool(args.include_merges),
        )
    except RuntimeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if args.verbose:
        print(f"Found {len(commits)} commits in {repo} ({args.rev}).", file=sys.stderr)

    diff_provider = _diff_provider(repo, args.config, config, args.cache_dir)
    try:
        names_per_commit = resolve_commits(
            commits,
            diff_provider=diff_provider,
            rules=rules,
            lookup=lookup,
            jobs=int(args.jobs),
            verbose=bool(args.verbose),
        )
    except DiffUnavailable as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    _print_results(
        commits,
        names_per_commit,
        fmt=str(args.format),
        summary=bool(args.summary),
        web_base=web_base_for_remote(get_remote_origin(repo)),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if argv and argv[0] == "init":
        return run_init(argv[1:])
    parser = _build_parser()
    parser.prog = "commit-credits"
    parser.epilog = "commands:\n  init  Write config.json and an empty names file if missing."
    parser.formatter_class = argparse.RawDescriptionHelpFormatter
    args = parser.parse_args(argv)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
