from __future__ import annotations

import gzip
import os
import re
import tempfile
from pathlib import Path

from .models import DiffProvider

_SHA1_RE = re.compile(r"^[0-9a-f]{7,64}$")


class ShowCache:
    """
    `git show` output persisted as `<root>/<sha1[:2]>/<sha1>.diff.gz`.

    Entries never change once written: a commit's diff against its parent is fixed.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, sha1: str) -> Path | None:
        s = (sha1 or "").strip().lower()
        if not _SHA1_RE.match(s):
            return None
        return self.root / s[:2] / f"{s}.diff.gz"

    def get(self, sha1: str) -> str | None:
        p = self.path_for(sha1)
        if p is None or not p.exists():
            return None
        try:
            return gzip.decompress(p.read_bytes()).decode("utf-8")
        except (OSError, EOFError, UnicodeDecodeError):
            # truncated or corrupt entry: treat as a miss, the next put() rewrites it
            return None

    def put(self, sha1: str, text: str) -> None:
        p = self.path_for(sha1)
        if p is None:
            return
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=str(p.parent))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(gzip.compress(text.encode("utf-8")))
            os.replace(tmp, p)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class CachedDiffProvider:
    def __init__(self, inner: DiffProvider, cache: ShowCache) -> None:
        self.inner = inner
        self.cache = cache

    def fetch_diff(self, sha1: str) -> str:
        text = self.cache.get(sha1)
        if text is not None:
            return text
        text = self.inner.fetch_diff(sha1)
        self.cache.put(sha1, text)
        return text
