"""State of one retrieval session: repository, listing, selection and last bundle."""

from __future__ import annotations
import logging
from typing import Any, List, Optional

from .bundle import Bundle, generate_bundle
from .errors import EmptySelection, GenerationInProgress, TreeFetchFailure
from .filters import filter_entries
from .github import GitHubClient, TreeListing
from .refs import RepoInfo, require_repo_ref
from .selection import Selection
from .tree import FileEntry, TreeNode, build_tree

logger = logging.getLogger(__name__)


class RetrieverSession:
    """
    Drives the fetch → select → generate flow against one ``GitHubClient``.

    A session is not re-entrant: ``generate`` refuses to start while a
    previous run is still going.
    """

    def __init__(self, client: GitHubClient, *, max_bytes: int = 0) -> None:
        self.client = client
        self.max_bytes = max_bytes
        self.repo: Optional[RepoInfo] = None
        self.entries: List[FileEntry] = []
        self.tree: List[TreeNode] = []
        self.selection = Selection()
        self.truncated = False
        self.result: Optional[Bundle] = None
        self._busy = False
        self._cancel_requested = False

    @property
    def busy(self) -> bool:
        return self._busy

    def fetch_repository(self, ref: str, branch: Optional[str] = None) -> TreeListing:
        """
        Load the repository listing and select every eligible file.

        ``InvalidReference`` leaves the session untouched; ``TreeFetchFailure``
        clears the listing and the selection.
        """
        repo = require_repo_ref(ref, branch)
        try:
            listing = self.client.fetch_tree(repo)
        except TreeFetchFailure:
            self.entries = []
            self.tree = []
            self.selection.select_none()
            self.truncated = False
            raise

        self.repo = repo
        self.entries = filter_entries(listing.entries, self.max_bytes)
        self.tree = build_tree(self.entries)
        self.selection.select_all(self.entries)
        self.truncated = listing.truncated
        self.result = None
        logger.info("Found %d text files in %s", len(self.entries), repo.full_name)
        return listing

    def cancel(self) -> None:
        if self._busy:
            self._cancel_requested = True

    def generate(self, **kwargs: Any) -> Bundle:
        """Run ``generate_bundle`` over the current selection; extra kwargs are passed through."""
        if self._busy:
            raise GenerationInProgress("A bundle is already being generated")
        if self.repo is None or not self.selection:
            raise EmptySelection("Please select at least one file")

        self._busy = True
        self._cancel_requested = False
        try:
            self.result = generate_bundle(
                self.selection.paths,
                self.entries,
                self.client.content_fetcher(self.repo),
                self.repo,
                should_cancel=lambda: self._cancel_requested,
                **kwargs,
            )
        finally:
            self._busy = False
        logger.info("Generated text from %d files", self.result.files_attempted)
        return self.result
