from __future__ import annotations

import dataclasses
from typing import Protocol

from .patterns import is_legacy_import


class DiffProvider(Protocol):
    def fetch_diff(self, sha1: str) -> str: ...


@dataclasses.dataclass
class Commit:
    sha1: str
    author: str
    message: str
    authored_timestamp: str = ""  # ISO 8601
    committer: str = ""
    committed_timestamp: str = ""  # ISO 8601
    imported_from_svn: bool | None = None
    git_show: str | None = None  # cached `git show` output, None until fetched

    def __post_init__(self) -> None:
        # Stored once from the message; later edits to the message do not change it.
        if self.imported_from_svn is None:
            self.imported_from_svn = is_legacy_import(self.message)

    def short_sha1(self, length: int = 7) -> str:
        return self.sha1[:length]

    @property
    def short_message(self) -> str | None:
        if self.message is None:
            return None
        return self.message.split("\n", 1)[0]

    def web_url(self, base_url: str) -> str:
        """URL of this commit on a hosting service, e.g. base_url="https://github.com/rails/rails"."""
        return f"{base_url.rstrip('/')}/commit/{self.sha1}"

    def diff_text(self, provider: DiffProvider) -> str:
        """
        Return `git show` for this commit, fetching it through `provider` on first use.

        Fetching is expensive, so it happens only for the commits that need it and
        the result stays in `git_show`. An empty string counts as cached.
        """
        if self.git_show is None:
            text = provider.fetch_diff(self.sha1)
            self.git_show = text
        return self.git_show


@dataclasses.dataclass
class ContributorCount:
    name: str = ""
    commits: int = 0
