from __future__ import annotations

import subprocess
from pathlib import Path
from urllib.parse import urlparse

from .models import Commit

# %x1f separates fields, %x1e terminates records; neither shows up in commit messages.
_LOG_FORMAT = "%H%x1f%an%x1f%aI%x1f%cn%x1f%cI%x1f%B%x1e"


class DiffUnavailable(RuntimeError):
    """The backend could not produce `git show` output for a commit."""


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def get_repo_toplevel(candidate: Path) -> Path | None:
    if not candidate.is_dir():
        return None
    code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    if code != 0:
        return None
    try:
        return Path(out.strip()).resolve()
    except Exception:
        return None


def get_remote_origin(repo: Path) -> str:
    code, out, _ = run_git(["config", "--get", "remote.origin.url"], cwd=repo)
    if code == 0:
        return out.strip()
    return ""


def web_base_for_remote(remote: str) -> str:
    """
    Turn a remote URL into an https base URL for commit links:
      - git@github.com:rails/rails.git -> https://github.com/rails/rails
      - https://user@github.com/rails/rails.git -> https://github.com/rails/rails
      - ssh://git@github.com:22/rails/rails.git -> https://github.com/rails/rails
    Returns "" when the remote is empty or not recognizable.
    """
    r = (remote or "").strip()
    if not r:
        return ""
    if "://" not in r and ":" in r and "@" in r.split(":", 1)[0]:
        left, path = r.split(":", 1)
        host = left.split("@", 1)[1]
    else:
        parsed = urlparse(r)
        if not parsed.scheme or not parsed.hostname:
            return ""
        host = parsed.hostname
        path = parsed.path
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    if not host or not path:
        return ""
    return f"https://{host}/{path}"


def parse_log_output(out: str) -> list[Commit]:
    commits: list[Commit] = []
    for record in out.split("\x1e"):
        record = record.lstrip("\n")
        if not record.strip():
            continue
        parts = record.split("\x1f", 5)
        if len(parts) != 6:
            continue
        sha1, author, authored, committer, committed, message = parts
        commits.append(
            Commit(
                sha1=sha1.strip(),
                author=author,
                message=message.rstrip("\n"),
                authored_timestamp=authored.strip(),
                committer=committer,
                committed_timestamp=committed.strip(),
            )
        )
    return commits


def list_commits(
    repo: Path,
    *,
    rev: str = "HEAD",
    since: str = "",
    max_count: int = 0,
    include_merges: bool = False,
) -> list[Commit]:
    """Commits reachable from `rev`, newest first, as `git log` orders them."""
    args = ["log", f"--pretty=format:{_LOG_FORMAT}"]
    if not include_merges:
        args.append("--no-merges")
    if since:
        args.append(f"--since={since}")
    if max_count > 0:
        args.append(f"--max-count={max_count}")
    args.extend([rev, "--"])
    code, out, err = run_git(args, cwd=repo)
    if code != 0:
        raise RuntimeError(f"git log failed in {repo}: {err.strip()}")
    return parse_log_output(out)


class GitShowProvider:
    """Diff provider backed by `git show` in a local repository."""

    def __init__(self, repo: Path, *, timeout_s: int = 300) -> None:
        self.repo = repo
        self.timeout_s = timeout_s

    def fetch_diff(self, sha1: str) -> str:
        if not self.repo.is_dir():
            raise DiffUnavailable(f"repository not found: {self.repo}")
        try:
            code, out, err = run_git(
                ["show", "--no-color", "--no-ext-diff", "--format=medium", sha1],
                cwd=self.repo,
                timeout_s=self.timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            raise DiffUnavailable(f"git show {sha1} timed out after {self.timeout_s}s") from e
        except OSError as e:
            raise DiffUnavailable(f"git show {sha1} could not run: {e}") from e
        if code != 0:
            raise DiffUnavailable(f"git show {sha1} failed: {err.strip()}")
        return out

