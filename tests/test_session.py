import pytest

from reporetriever import (
    EmptySelection,
    GenerationInProgress,
    InvalidReference,
    RetrieverSession,
    TreeFetchFailure,
)

from conftest import FakeResponse, tree_payload


def _setup_repo(fake_session, branch="main"):
    fake_session.add(
        f"/repos/acme/widgets/git/trees/{branch}",
        FakeResponse(payload=tree_payload([
            {"path": "README.md", "type": "blob", "size": 10},
            {"path": "src", "type": "tree"},
            {"path": "src/app.py", "type": "blob", "size": 20},
            {"path": "src/logo.png", "type": "blob", "size": 999},
            {"path": "node_modules/x/index.js", "type": "blob", "size": 5},
        ])),
    )
    fake_session.add_file("acme", "widgets", "README.md", "# Widgets")
    fake_session.add_file("acme", "widgets", "src/app.py", "print(1)")


def test_fetch_selects_every_eligible_file(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    listing = session.fetch_repository("acme/widgets")

    assert len(listing.entries) == 5
    assert [e.path for e in session.entries] == ["README.md", "src/app.py"]
    assert session.selection.paths == {"README.md", "src/app.py"}
    assert [n.name for n in session.tree] == ["README.md", "src"]
    assert session.repo.branch == "main"


def test_generate_uses_selection(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    session.fetch_repository("https://github.com/acme/widgets")
    session.selection.toggle("README.md")

    bundle = session.generate(sleep=lambda s: None)
    assert session.result is bundle
    assert [s.path for s in bundle.sections] == ["src/app.py"]
    assert "```python\nprint(1)\n```" in bundle.text
    assert not session.busy


def test_invalid_reference_leaves_state_alone(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    session.fetch_repository("acme/widgets")
    with pytest.raises(InvalidReference):
        session.fetch_repository("nonsense")
    assert session.selection.paths == {"README.md", "src/app.py"}
    assert fake_session.calls and len(fake_session.calls) == 1


def test_tree_failure_clears_selection(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    session.fetch_repository("acme/widgets")
    with pytest.raises(TreeFetchFailure):
        session.fetch_repository("acme/widgets", branch="missing")
    assert session.entries == []
    assert session.tree == []
    assert len(session.selection) == 0


def test_generate_requires_selection(client, fake_session):
    session = RetrieverSession(client)
    with pytest.raises(EmptySelection):
        session.generate()

    _setup_repo(fake_session)
    session.fetch_repository("acme/widgets")
    session.selection.select_none()
    with pytest.raises(EmptySelection):
        session.generate()


def test_generate_is_not_reentrant(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    session.fetch_repository("acme/widgets")
    errors = []

    def on_progress(fraction, path):
        try:
            session.generate()
        except GenerationInProgress as e:
            errors.append(e)

    session.generate(sleep=lambda s: None, on_progress=on_progress)
    assert len(errors) == 2


def test_cancel_stops_after_current_file(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client)
    session.fetch_repository("acme/widgets")

    bundle = session.generate(sleep=lambda s: None, on_progress=lambda f, p: session.cancel())
    assert bundle.cancelled
    assert [s.path for s in bundle.sections] == ["README.md"]


def test_max_bytes_limits_entries(client, fake_session):
    _setup_repo(fake_session)
    session = RetrieverSession(client, max_bytes=15)
    session.fetch_repository("acme/widgets")
    assert [e.path for e in session.entries] == ["README.md"]
