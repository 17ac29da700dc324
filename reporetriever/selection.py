"""The set of file paths the user picked for the bundle."""

from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Set

import pathspec

from .tree import FileEntry, TreeNode, iter_nodes


class Selection:
    """Mutable set of selected file paths with the bulk operations of the selector."""

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: Set[str] = set(paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __bool__(self) -> bool:
        return bool(self._paths)

    def __repr__(self) -> str:
        return f"Selection({sorted(self._paths)!r})"

    @property
    def paths(self) -> frozenset:
        return frozenset(self._paths)

    def add(self, path: str) -> None:
        self._paths.add(path)

    def discard(self, path: str) -> None:
        self._paths.discard(path)

    def toggle(self, path: str, checked: Optional[bool] = None) -> bool:
        """Flip (or force, with ``checked``) one path; returns the new state."""
        if checked is None:
            checked = path not in self._paths
        if checked:
            self._paths.add(path)
        else:
            self._paths.discard(path)
        return checked

    def select_all(self, entries: Iterable[FileEntry]) -> None:
        self._paths = {e.path for e in entries if e.is_file}

    def select_none(self) -> None:
        self._paths.clear()

    def select_directory(self, node: TreeNode, checked: bool = True) -> int:
        """Check or uncheck every file below ``node``; returns how many files it covers."""
        count = 0
        for n in iter_nodes([node]):
            if not n.is_dir:
                self.toggle(n.path, checked)
                count += 1
        return count

    def select_matching(
        self,
        entries: Iterable[FileEntry],
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> List[str]:
        """
        Replace the selection with the files matching gitignore-style globs.

        With no ``include`` patterns every file is a candidate; ``exclude``
        patterns are applied afterwards. Returns the new selection in entry
        order.
        """
        include = list(include)
        exclude = list(exclude)
        include_spec = pathspec.PathSpec.from_lines("gitwildmatch", include) if include else None
        exclude_spec = pathspec.PathSpec.from_lines("gitwildmatch", exclude) if exclude else None

        chosen: List[str] = []
        for e in entries:
            if not e.is_file:
                continue
            if include_spec is not None and not include_spec.match_file(e.path):
                continue
            if exclude_spec is not None and exclude_spec.match_file(e.path):
                continue
            chosen.append(e.path)
        self._paths = set(chosen)
        return chosen
