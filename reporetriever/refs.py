"""Parsing of repository references (``https://github.com/o/r/tree/b`` or ``o/r``)."""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidReference

DEFAULT_BRANCH = "main"

REF_PATTERNS = [
    re.compile(r"github\.com/([^/]+)/([^/]+)(?:/tree/([^/]+))?"),
    re.compile(r"^([^/]+)/([^/]+)$"),
]


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    @property
    def download_name(self) -> str:
        """File name offered for the generated bundle."""
        return f"{self.owner}-{self.repo}-{self.branch}.txt"


def parse_repo_ref(text: str) -> Optional[RepoInfo]:
    """Return the ``RepoInfo`` for a URL or shorthand, or None when it matches neither shape."""
    text = text.strip()
    for pattern in REF_PATTERNS:
        m = pattern.search(text)
        if m:
            repo = m.group(2)
            if repo.endswith(".git"):
                repo = repo[:-4]
            if not repo:
                continue
            groups = m.groups()
            branch = groups[2] if len(groups) > 2 else None
            return RepoInfo(m.group(1), repo, branch or DEFAULT_BRANCH)
    return None


def require_repo_ref(text: str, branch: Optional[str] = None) -> RepoInfo:
    if not text or not text.strip():
        raise InvalidReference("Please enter a repository URL")
    info = parse_repo_ref(text)
    if info is None:
        raise InvalidReference(f"Invalid repository URL format: {text.strip()}")
    if branch:
        info = RepoInfo(info.owner, info.repo, branch)
    return info
