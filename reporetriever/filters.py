"""Static allow/deny lists deciding which repository files can be bundled."""

from __future__ import annotations
import posixpath
from typing import Iterable, List

from .tree import FileEntry

TEXT_EXTENSIONS = {
    ".js", ".jsx", ".ts", ".tsx", ".json", ".md", ".txt", ".yml", ".yaml",
    ".html", ".htm", ".css", ".scss", ".sass", ".less", ".xml", ".svg",
    ".py", ".java", ".c", ".cpp", ".h", ".hpp", ".cs", ".php", ".rb",
    ".go", ".rs", ".swift", ".kt", ".scala", ".sh", ".bash", ".zsh",
    ".sql", ".r", ".matlab", ".m", ".pl", ".lua", ".dart", ".vue",
    ".toml", ".ini", ".cfg", ".conf", ".env", ".gitignore", ".dockerignore",
}

TEXT_BASENAMES = {"dockerfile", "readme", "license", "changelog"}

# Common bloat files to auto-skip
BLOAT_PATTERNS = {
    "package-lock.json", "yarn.lock", "poetry.lock", "Cargo.lock", "pnpm-lock.yaml",
    "Gemfile.lock", "composer.lock", "Pipfile.lock", "go.sum", "bun.lockb", ".DS_Store",
}

BLOAT_SUFFIXES = (".log", ".lock")

BLOAT_DIRS = {
    "node_modules", ".git", ".vscode", ".idea",
    "dist", "build", "out", "target", "bin", "obj",
    ".next", "coverage", ".nyc_output", "log", "logs",
}


def is_text_file(filename: str) -> bool:
    """Check the allow-list of text-like extensions and well-known basenames."""
    name = posixpath.basename(filename).lower()
    if not name:
        return False
    if name.endswith(tuple(TEXT_EXTENSIONS)):
        return True
    # Dockerfile, Dockerfile.dev, README, LICENSE, ...
    return name.split(".", 1)[0] in TEXT_BASENAMES


def should_include_file(path: str) -> bool:
    """Check the path against the deny-list (dependencies, build output, VCS, locks, logs)."""
    parts = path.split("/")
    filename = parts[-1]
    if filename in BLOAT_PATTERNS or filename.endswith(BLOAT_SUFFIXES):
        return False
    for part in parts[:-1]:
        if part in BLOAT_DIRS:
            return False
    return True


def filter_entries(entries: Iterable[FileEntry], max_bytes: int = 0) -> List[FileEntry]:
    kept: List[FileEntry] = []
    for e in entries:
        if not e.is_file:
            continue
        if not (is_text_file(e.name) and should_include_file(e.path)):
            continue
        if max_bytes > 0 and e.size is not None and e.size > max_bytes:
            continue
        kept.append(e)
    return kept
