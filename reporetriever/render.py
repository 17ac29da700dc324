"""
Standalone HTML preview of a generated bundle.

The preview shows the same sections as the text bundle, with a sidebar
folder tree of the included files, Pygments syntax highlighting for code
and rendered Markdown for ``.md`` files. Failed files are shown with their
error message.
"""

from __future__ import annotations
import html
import os
from typing import List

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_for_filename, TextLexer
from pygments.util import ClassNotFound
import markdown

from .bundle import Bundle, BundleSection, format_timestamp
from .tree import TreeNode, bytes_human

MARKDOWN_EXTENSIONS = {".md", ".markdown", ".mdown", ".mkd", ".mkdn"}

# File type icons
FILE_ICONS = {
    ".py": "🐍",
    ".js": "💛",
    ".jsx": "⚛️",
    ".ts": "🔷",
    ".tsx": "⚛️",
    ".html": "🌐",
    ".css": "🎨",
    ".scss": "🎨",
    ".json": "📋",
    ".md": "📄",
    ".txt": "📝",
    ".yaml": "⚙️",
    ".yml": "⚙️",
    ".toml": "⚙️",
    ".xml": "📰",
    ".sh": "🔧",
    ".go": "🐹",
    ".rs": "🦀",
    ".java": "☕",
    ".cpp": "⚡",
    ".c": "⚡",
    ".rb": "💎",
    ".php": "🐘",
    ".swift": "🦅",
    ".kt": "🟣",
}


def render_markdown_text(md_text: str) -> str:
    return markdown.markdown(md_text, extensions=["fenced_code", "tables", "toc"])


def highlight_code(text: str, filename: str, formatter: HtmlFormatter) -> str:
    try:
        lexer = get_lexer_for_filename(filename, stripall=False)
    except ClassNotFound:
        lexer = TextLexer(stripall=False)
    return highlight(text, lexer, formatter)


def slugify(path_str: str) -> str:
    out = []
    for ch in path_str:
        if ch.isalnum() or ch in {"-", "_"}:
            out.append(ch)
        else:
            out.append("-")
    return "".join(out)


def get_file_icon(filename: str) -> str:
    """Get emoji icon for file type"""
    ext = os.path.splitext(filename)[1].lower()
    return FILE_ICONS.get(ext, "📄")


def build_folder_tree(tree: List[TreeNode], included: set) -> str:
    """Nested sidebar list of the included files, folders first."""

    def has_included(node: TreeNode) -> bool:
        if not node.is_dir:
            return node.path in included
        return any(has_included(c) for c in node.children)

    def render_nodes(nodes: List[TreeNode], level: int) -> str:
        indent = "  " * level
        parts: List[str] = []
        visible = [n for n in nodes if has_included(n)]
        for node in sorted(visible, key=lambda n: (not n.is_dir, n.name)):
            if node.is_dir:
                parts.append(f'{indent}<li class="tree-folder">')
                parts.append(f'{indent}  <span class="folder-icon">📁</span> <strong>{html.escape(node.name)}/</strong>')
                parts.append(f'{indent}  <ul>')
                parts.append(render_nodes(node.children, level + 1))
                parts.append(f'{indent}  </ul>')
                parts.append(f'{indent}</li>')
            else:
                size = ""
                if node.entry is not None and node.entry.size is not None:
                    size = f' <span class="muted">({bytes_human(node.entry.size)})</span>'
                parts.append(
                    f'{indent}<li class="tree-file"><a href="#file-{slugify(node.path)}">'
                    f'<span class="file-icon">{get_file_icon(node.name)}</span>{html.escape(node.name)}</a>{size}</li>'
                )
        return "\n".join(parts)

    return render_nodes(tree, 0)


def render_section(section: BundleSection, formatter: HtmlFormatter) -> str:
    anchor = slugify(section.path)
    icon = get_file_icon(section.path)
    if not section.ok:
        body_html = f'<pre class="error">Error fetching file content: {html.escape(section.error or "")}</pre>'
    elif os.path.splitext(section.path)[1].lower() in MARKDOWN_EXTENSIONS:
        body_html = f'<div class="markdown">{render_markdown_text(section.content or "")}</div>'
    else:
        body_html = f'<div class="highlight">{highlight_code(section.content or "", section.path, formatter)}</div>'
    lang = f' <span class="muted">{html.escape(section.language)}</span>' if section.language else ""
    return f"""
<section class="file-section" id="file-{anchor}">
  <h2><span class="file-icon">{icon}</span> {html.escape(section.path)}{lang}</h2>
  <div class="file-body">{body_html}</div>
  <div class="back-top"><a href="#top">↑ Back to top</a></div>
</section>
"""


def build_html(bundle: Bundle, tree: List[TreeNode]) -> str:
    formatter = HtmlFormatter(nowrap=False)
    pygments_css = formatter.get_style_defs('.highlight')
    repo = bundle.repo

    included = {s.path for s in bundle.sections}
    folder_tree_html = build_folder_tree(tree, included)
    sections_html = "".join(render_section(s, formatter) for s in bundle.sections)

    status = ""
    if bundle.cancelled:
        status = f' · <strong>Cancelled</strong> after {bundle.files_attempted} of {bundle.files_included}'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>reporetriever – {html.escape(repo.full_name)}</title>
<style>
  * {{ box-sizing: border-box; }}
  body {{
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
    margin: 0;
    line-height: 1.6;
    background: #f7fafc;
  }}
  .sidebar {{
    position: fixed;
    left: 0;
    top: 0;
    width: 300px;
    height: 100vh;
    background: white;
    border-right: 2px solid #e2e8f0;
    overflow-y: auto;
    padding: 1rem;
  }}
  .sidebar ul {{ list-style: none; padding-left: 1rem; margin: 0; }}
  .sidebar > ul {{ padding-left: 0; }}
  .sidebar a {{ color: #2ecc71; text-decoration: none; font-size: 0.9rem; }}
  .sidebar a:hover {{ text-decoration: underline; color: #27ae60; }}
  .page {{ margin-left: 300px; background: white; min-height: 100vh; }}
  header {{
    background: linear-gradient(135deg, #2ecc71 0%, #3498db 100%);
    color: white;
    padding: 2rem;
  }}
  header a {{ color: white; }}
  h1 {{ margin: 0 0 0.5rem 0; font-size: 2rem; }}
  main {{ padding: 2rem; }}
  .file-section {{ margin-bottom: 2rem; border: 1px solid #e2e8f0; border-radius: 8px; padding: 1rem; }}
  .file-section h2 {{ font-size: 1.1rem; margin-top: 0; }}
  .highlight pre {{ overflow-x: auto; padding: 1rem; border-radius: 6px; }}
  .error {{ color: #c53030; background: #fff5f5; padding: 1rem; border-radius: 6px; }}
  .muted {{ color: #718096; font-weight: normal; font-size: 0.85em; }}
  .back-top {{ text-align: right; font-size: 0.85rem; }}
  {pygments_css}
</style>
</head>
<body>
<a id="top"></a>
<nav class="sidebar">
  <h3>📑 Files ({len(bundle.sections)})</h3>
  <ul>
{folder_tree_html}
  </ul>
</nav>
<div class="page">
  <header>
    <h1>🚀 {html.escape(repo.full_name)}</h1>
    <div class="meta">
      <div><strong>Repository:</strong> <a href="{html.escape(repo.html_url)}">{html.escape(repo.html_url)}</a></div>
      <div><strong>Branch:</strong> {html.escape(repo.branch)}</div>
      <div><strong>Generated:</strong> {format_timestamp(bundle.generated_at)}</div>
      <div><strong>Files included:</strong> {bundle.files_included} · <strong>Fetched:</strong> {bundle.files_succeeded} · <strong>Failed:</strong> {len(bundle.failures)}{status}</div>
    </div>
  </header>
  <main>
    {sections_html}
  </main>
</div>
</body>
</html>
"""
