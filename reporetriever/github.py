"""Thin client for the two GitHub REST endpoints the tool needs."""

from __future__ import annotations
import base64
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import quote

import requests

from .errors import FileFetchFailure, TreeFetchFailure
from .refs import RepoInfo
from .tree import DIR, FILE, FileEntry

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30  # seconds

# git object kind -> entry type; commits (submodules) are skipped
ENTRY_TYPES = {"blob": FILE, "tree": DIR, FILE: FILE, DIR: DIR}


@dataclass
class TreeListing:
    entries: List[FileEntry]
    truncated: bool = False


def describe_response(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


class GitHubClient:
    """
    Read-only access to repository trees and file contents.

    The access token is passed in explicitly and lives as long as the
    client does. Without a token the anonymous rate limit applies and
    private repositories are unreachable.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = API_BASE_URL,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            self.headers["Authorization"] = f"token {token}"

    def _get(self, url: str, params: Optional[dict] = None) -> requests.Response:
        logger.debug("GET %s %s", url, params or "")
        return self.session.get(url, headers=self.headers, params=params, timeout=self.timeout)

    def fetch_tree(self, repo: RepoInfo) -> TreeListing:
        url = f"{self.base_url}/repos/{repo.owner}/{repo.repo}/git/trees/{quote(repo.branch, safe='')}"
        try:
            response = self._get(url, params={"recursive": "1"})
        except requests.RequestException as e:
            raise TreeFetchFailure(f"Failed to fetch repository: {e}") from e
        if not response.ok:
            raise TreeFetchFailure(f"Failed to fetch repository: {describe_response(response)}")

        try:
            data = response.json()
        except ValueError as e:
            raise TreeFetchFailure(f"Failed to fetch repository: invalid JSON ({e})") from e
        entries: List[FileEntry] = []
        for item in data.get("tree", []):
            kind = ENTRY_TYPES.get(item.get("type"))
            path = item.get("path")
            if kind is None or not path:
                continue
            entries.append(FileEntry(path=path, type=kind, size=item.get("size")))

        truncated = bool(data.get("truncated", False))
        if truncated:
            logger.warning(
                "Tree listing for %s@%s is truncated; %d entries returned",
                repo.full_name, repo.branch, len(entries),
            )
        logger.info("Fetched %d tree entries for %s@%s", len(entries), repo.full_name, repo.branch)
        return TreeListing(entries=entries, truncated=truncated)

    def fetch_file_content(self, repo: RepoInfo, path: str) -> str:
        url = f"{self.base_url}/repos/{repo.owner}/{repo.repo}/contents/{quote(path)}"
        try:
            response = self._get(url, params={"ref": repo.branch})
        except requests.RequestException as e:
            raise FileFetchFailure(f"Failed to fetch file: {e}") from e
        if not response.ok:
            raise FileFetchFailure(f"Failed to fetch file: {describe_response(response)}")

        try:
            data = response.json()
        except ValueError as e:
            raise FileFetchFailure(f"Failed to fetch file: invalid JSON ({e})") from e
        if not isinstance(data, dict):
            # a directory listing comes back as a JSON array
            raise FileFetchFailure(f"Failed to fetch file: {path} is not a file")
        content = data.get("content") or ""
        if content and data.get("encoding") == "base64":
            raw = base64.b64decode(content.replace("\n", ""))
            return raw.decode("utf-8", errors="replace")
        return content

    def content_fetcher(self, repo: RepoInfo) -> Callable[[str], str]:
        """Bind ``repo`` so the result fits ``generate_bundle``'s ``fetch_content``."""
        def fetch(path: str) -> str:
            return self.fetch_file_content(repo, path)
        return fetch
