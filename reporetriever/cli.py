"""Command line entry point: fetch a GitHub repository and write an LLM-ready text bundle."""

from __future__ import annotations
import argparse
import logging
import os
import pathlib
import signal
import sys
import webbrowser
from typing import List, Optional

from .bundle import DEFAULT_DELAY
from .errors import RepoRetrieverError
from .github import DEFAULT_TIMEOUT, GitHubClient
from .render import build_html
from .session import RetrieverSession
from .tree import bytes_human, render_tree

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def token_from_env() -> Optional[str]:
    for name in TOKEN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )
    # Silence noisy HTTP libs
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="reporetriever",
        description="Convert a GitHub repository into a single LLM-friendly text file",
    )
    ap.add_argument("repo", help="GitHub repo URL (https://github.com/owner/repo[/tree/branch]) or owner/repo")
    ap.add_argument("-b", "--branch", help="Branch, tag or commit (default: from the URL, else main)")
    ap.add_argument("--token", help="GitHub access token (default: $GITHUB_TOKEN or $GH_TOKEN)")
    ap.add_argument("-o", "--out", help="Output text file (default: owner-repo-branch.txt)")
    ap.add_argument("--html", help="Also write an HTML preview of the bundle to this path")
    ap.add_argument("--include", action="append", default=[], metavar="GLOB",
                    help="Only select files matching this gitignore-style pattern (repeatable)")
    ap.add_argument("--exclude", action="append", default=[], metavar="GLOB",
                    help="Deselect files matching this gitignore-style pattern (repeatable)")
    ap.add_argument("--list", action="store_true", help="Print the file tree with the selection and exit")
    ap.add_argument("--max-bytes", type=int, default=0, help="Skip files larger than this (default: no limit)")
    ap.add_argument("--delay", type=float, default=DEFAULT_DELAY,
                    help=f"Pause between file fetches in seconds (default: {DEFAULT_DELAY})")
    ap.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds")
    ap.add_argument("--no-open", action="store_true", help="Don't open the HTML preview in a browser")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress details")
    return ap


def print_progress(fraction: float, path: str) -> None:
    print(f"  [{fraction * 100:5.1f}%] {path}", file=sys.stderr)


def run(args: argparse.Namespace) -> int:
    client = GitHubClient(args.token or token_from_env(), timeout=args.timeout)
    session = RetrieverSession(client, max_bytes=args.max_bytes)

    print(f"📁 Fetching {args.repo}...", file=sys.stderr)
    listing = session.fetch_repository(args.repo, args.branch)
    repo = session.repo
    print(f"✓ Found {len(session.entries)} text files ({len(listing.entries)} entries in {repo.full_name}@{repo.branch})", file=sys.stderr)
    if session.truncated:
        print("⚠️  GitHub truncated the file listing; some files are missing from the tree", file=sys.stderr)

    if args.include or args.exclude:
        session.selection.select_matching(session.entries, args.include, args.exclude)
        print(f"✓ Selected {len(session.selection)} files", file=sys.stderr)

    if args.list:
        print(render_tree(session.tree, session.selection.paths))
        return 0

    print(f"🔨 Generating bundle from {len(session.selection)} files...", file=sys.stderr)

    def on_sigint(signum, frame):
        print("⏹  Cancelling after the current file...", file=sys.stderr)
        session.cancel()

    previous = signal.signal(signal.SIGINT, on_sigint)
    try:
        bundle = session.generate(delay=args.delay, on_progress=print_progress)
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    if bundle.cancelled:
        print(f"⚠️  Cancelled: {bundle.files_attempted} of {bundle.files_included} files processed", file=sys.stderr)
    for section in bundle.failures:
        print(f"⚠️  {section.path}: {section.error}", file=sys.stderr)
    print(f"✓ Generated text from {bundle.files_attempted} files ({bundle.files_succeeded} fetched)", file=sys.stderr)

    out_path = pathlib.Path(args.out or repo.download_name)
    print(f"💾 Writing to {out_path}...", file=sys.stderr)
    out_path.write_text(bundle.text, encoding="utf-8")
    print(f"✓ Wrote {bytes_human(out_path.stat().st_size)}", file=sys.stderr)

    if args.html:
        html_path = pathlib.Path(args.html)
        html_path.write_text(build_html(bundle, session.tree), encoding="utf-8")
        print(f"✓ Wrote HTML preview to {html_path}", file=sys.stderr)
        if not args.no_open:
            print(f"🌐 Opening in browser...", file=sys.stderr)
            webbrowser.open(f"file://{html_path.resolve()}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        return run(args)
    except RepoRetrieverError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
