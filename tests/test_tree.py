import logging

from reporetriever import FileEntry, build_tree, render_tree
from reporetriever.tree import bytes_human, file_paths, find_node, iter_nodes


def _f(path, size=None):
    return FileEntry(path, "file", size)


def _d(path):
    return FileEntry(path, "dir")


def _shape(nodes):
    """Nested (name, kind, children) tuples for structural comparison."""
    return [(n.name, n.kind, _shape(n.children)) for n in nodes]


def test_example_tree():
    roots = build_tree([_f("a/b.txt"), _f("a/c/d.txt")])
    assert _shape(roots) == [
        ("a", "dir", [
            ("b.txt", "file", []),
            ("c", "dir", [("d.txt", "file", [])]),
        ]),
    ]


def test_paths_join_parent_and_name():
    roots = build_tree([_f("src/pkg/mod.py"), _f("README.md")])
    for node in iter_nodes(roots):
        parent, _, name = node.path.rpartition("/")
        assert name == node.name
        if parent:
            assert find_node(roots, parent) is not None
    paths = [n.path for n in iter_nodes(roots)]
    assert len(paths) == len(set(paths))


def test_intermediate_directories_are_synthesized():
    roots = build_tree([_f("x/y/z/deep.py")])
    assert [n.path for n in iter_nodes(roots)] == ["x", "x/y", "x/y/z", "x/y/z/deep.py"]
    assert [n.kind for n in iter_nodes(roots)] == ["dir", "dir", "dir", "file"]


def test_input_order_does_not_matter():
    entries = [_f("b/2.py"), _f("a.py"), _f("b/1.py"), _d("b")]
    assert _shape(build_tree(entries)) == _shape(build_tree(list(reversed(entries))))
    assert [n.name for n in build_tree(entries)] == ["a.py", "b"]


def test_leaves_match_file_entries():
    entries = [_f("a/b.txt"), _d("a"), _d("empty"), _f("c.md"), _f("a/c/d.txt")]
    roots = build_tree(entries)
    assert sorted(file_paths(roots)) == sorted(e.path for e in entries if e.is_file)
    assert find_node(roots, "empty").is_dir
    assert find_node(roots, "empty").children == []


def test_rebuild_is_structurally_identical():
    entries = [_f("a/b.txt"), _f("a/c/d.txt"), _f("e.py")]
    assert _shape(build_tree(entries)) == _shape(build_tree(entries))


def test_duplicates_are_idempotent():
    roots = build_tree([_f("a/b.txt"), _f("a/b.txt"), _d("a")])
    assert _shape(roots) == [("a", "dir", [("b.txt", "file", [])])]


def test_file_nodes_keep_their_entry():
    entry = _f("a/b.txt", 12)
    roots = build_tree([entry])
    assert find_node(roots, "a/b.txt").entry == entry
    assert find_node(roots, "a").entry is None


def test_collision_first_registration_wins(caplog):
    # "a" as a file sorts before "a/b.txt", so the file wins and the child is dropped
    with caplog.at_level(logging.WARNING, logger="reporetriever.tree"):
        roots = build_tree([_f("a/b.txt"), _f("a")])
    assert _shape(roots) == [("a", "file", [])]
    assert "Dropping a/b.txt" in caplog.text


def test_collision_dir_then_file(caplog):
    with caplog.at_level(logging.WARNING, logger="reporetriever.tree"):
        roots = build_tree([_d("lib"), _f("lib")])
    # equal paths keep input order through the stable sort
    assert _shape(roots) == [("lib", "dir", [])]
    assert "already registered as dir" in caplog.text


def test_render_tree_with_selection():
    roots = build_tree([_f("a/b.txt", 2048), _f("a/c/d.txt"), _f("z.py", 10)])
    out = render_tree(roots, {"a/b.txt", "z.py"})
    assert out.splitlines() == [
        "├── a/",
        "│   ├── [x] b.txt (2.0 KiB)",
        "│   └── c/",
        "│       └── [ ] d.txt",
        "└── [x] z.py (10 B)",
    ]


def test_render_tree_without_selection():
    out = render_tree(build_tree([_f("a/b.txt")]))
    assert out == "└── a/\n    └── b.txt"


def test_bytes_human():
    assert bytes_human(0) == "0 B"
    assert bytes_human(1023) == "1023 B"
    assert bytes_human(1536) == "1.5 KiB"
    assert bytes_human(5 * 1024 * 1024) == "5.0 MiB"
