"""
reporetriever: convert a GitHub repository into one LLM-friendly text file.

The package fetches a repository's file tree, builds a selection tree from
the flat listing, and concatenates the selected files into a Markdown-like
bundle with per-file headings and language-tagged code fences.
"""

from __future__ import annotations

from .bundle import Bundle, BundleSection, generate_bundle, language_tag
from .errors import (
    EmptySelection,
    FileFetchFailure,
    GenerationInProgress,
    InvalidReference,
    RepoRetrieverError,
    TreeFetchFailure,
)
from .filters import filter_entries, is_text_file, should_include_file
from .github import GitHubClient, TreeListing
from .refs import RepoInfo, parse_repo_ref, require_repo_ref
from .selection import Selection
from .session import RetrieverSession
from .tree import FileEntry, TreeNode, build_tree, render_tree

__all__ = [
    "Bundle",
    "BundleSection",
    "generate_bundle",
    "language_tag",
    "EmptySelection",
    "FileFetchFailure",
    "GenerationInProgress",
    "InvalidReference",
    "RepoRetrieverError",
    "TreeFetchFailure",
    "filter_entries",
    "is_text_file",
    "should_include_file",
    "GitHubClient",
    "TreeListing",
    "RepoInfo",
    "parse_repo_ref",
    "require_repo_ref",
    "Selection",
    "RetrieverSession",
    "FileEntry",
    "TreeNode",
    "build_tree",
    "render_tree",
]
