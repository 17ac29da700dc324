"""
Bundle generation: fetch the selected files one by one and concatenate them.

The output is a plain Markdown-like document::

    # owner/repo

    Repository: https://github.com/owner/repo
    Branch: main
    Generated: 2024-05-01T12:00:00.000Z
    Files included: 2

    ---

    ## File: src/app.py

    ```python
    ...
    ```

Files are fetched strictly sequentially with a short pause between them to
stay under API rate limits. A failing file still gets its section, holding
the error message instead of the content, and never aborts the run.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AbstractSet, Callable, Iterable, List, Optional

from .errors import EmptySelection
from .refs import RepoInfo
from .tree import FileEntry

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.1  # seconds between two file fetches

LANGUAGE_TAGS = {
    "js": "javascript",
    "jsx": "jsx",
    "ts": "typescript",
    "tsx": "tsx",
    "py": "python",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "php": "php",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
    "sh": "bash",
    "yml": "yaml",
    "yaml": "yaml",
    "json": "json",
    "xml": "xml",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "md": "markdown",
}

FetchContent = Callable[[str], str]
ProgressCallback = Callable[[float, str], None]


def language_tag(filename: str) -> str:
    """Fence tag for a file name; unmapped extensions pass through lowercased."""
    name = filename.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    ext = name.rsplit(".", 1)[1].lower()
    if not ext:
        return ""
    return LANGUAGE_TAGS.get(ext, ext)


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class BundleSection:
    path: str
    language: str
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        if self.error is not None:
            return f"## File: {self.path}\n\nError fetching file content: {self.error}\n\n"
        return f"## File: {self.path}\n\n```{self.language}\n{self.content}\n```\n\n"


@dataclass
class Bundle:
    repo: RepoInfo
    generated_at: datetime
    files_included: int
    sections: List[BundleSection] = field(default_factory=list)
    cancelled: bool = False

    @property
    def files_attempted(self) -> int:
        return len(self.sections)

    @property
    def files_succeeded(self) -> int:
        return sum(1 for s in self.sections if s.ok)

    @property
    def failures(self) -> List[BundleSection]:
        return [s for s in self.sections if not s.ok]

    def header(self) -> str:
        r = self.repo
        return (
            f"# {r.owner}/{r.repo}\n\n"
            f"Repository: {r.html_url}\n"
            f"Branch: {r.branch}\n"
            f"Generated: {format_timestamp(self.generated_at)}\n"
            f"Files included: {self.files_included}\n\n"
            f"---\n\n"
        )

    @property
    def text(self) -> str:
        return self.header() + "".join(s.render() for s in self.sections)


def generate_bundle(
    selected_paths: AbstractSet[str],
    all_entries: Iterable[FileEntry],
    fetch_content: FetchContent,
    repo: RepoInfo,
    *,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    clock: Optional[Callable[[], datetime]] = None,
    on_progress: Optional[ProgressCallback] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Bundle:
    """
    Fetch every selected file and assemble the bundle.

    Selected files are taken in the order of ``all_entries``, not in
    selection order. ``fetch_content`` is called once per file, never
    concurrently; any exception it raises is recorded in that file's
    section. After each file ``on_progress(fraction, path)`` is called and,
    if another file follows, ``sleep(delay)``. ``should_cancel`` is checked
    before each file; a cancelled run returns the sections produced so far.

    Raises
    ------
    EmptySelection
        If ``selected_paths`` is empty. Nothing is fetched.
    """
    if not selected_paths:
        raise EmptySelection("Please select at least one file")

    files = [e for e in all_entries if e.is_file and e.path in selected_paths]
    total = len(files)
    generated_at = clock() if clock is not None else datetime.now(timezone.utc)
    bundle = Bundle(repo=repo, generated_at=generated_at, files_included=total)
    logger.info("Generating bundle for %s (%d files)", repo.full_name, total)

    for index, entry in enumerate(files):
        if should_cancel is not None and should_cancel():
            logger.info("Generation cancelled after %d of %d files", index, total)
            bundle.cancelled = True
            break

        section = BundleSection(path=entry.path, language=language_tag(entry.name))
        try:
            section.content = fetch_content(entry.path)
        except Exception as e:
            logger.warning("Error fetching %s: %s", entry.path, e)
            section.error = str(e) or "Unknown error"
        bundle.sections.append(section)

        if on_progress is not None:
            on_progress((index + 1) / total, entry.path)
        if index < total - 1 and delay > 0:
            sleep(delay)

    return bundle
