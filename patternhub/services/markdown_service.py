"""
Markdown to HTML rendering for pattern articles.

CommonMark via markdown-it-py with tables, strikethrough, task lists,
autolinks, heading anchors and Pygments highlighting. Raw HTML in the source
is escaped and unsafe link protocols are rejected by the parser. After
rendering, fenced ``mermaid`` blocks are promoted to ``<div class="mermaid">``
containers holding the unescaped diagram source.
"""
from dataclasses import dataclass
from html import unescape
from typing import Optional
import logging
import re

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from patternhub.core.config import settings

logger = logging.getLogger(__name__)

MERMAID_BLOCK = re.compile(
    r'<pre><code class="language-mermaid">(.*?)</code></pre>', re.DOTALL
)

# Anything that is not ASCII alphanumeric or a CJK ideograph becomes a dash.
_ANCHOR_SEPARATORS = re.compile(r"[^a-z0-9\u4e00-\u9fa5]+")


def heading_anchor(text: str) -> str:
    """URL fragment for a heading title."""
    slug = _ANCHOR_SEPARATORS.sub("-", text.lower()).strip("-")
    return slug or "section"


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    anchor: str


@dataclass(frozen=True)
class RenderedDocument:
    html: str
    headings: list[Heading]


class MarkdownRenderer:
    """Stateless Markdown renderer; one instance can serve every request."""

    def __init__(self, max_nesting: Optional[int] = None) -> None:
        self._formatter = HtmlFormatter(nowrap=True)
        self._md = (
            MarkdownIt(
                "commonmark",
                {
                    "html": False,
                    "linkify": True,
                    "maxNesting": max_nesting or settings.MARKDOWN_MAX_NESTING,
                    "highlight": self._highlight,
                },
            )
            .enable(["table", "strikethrough", "linkify"])
            .use(tasklists_plugin, label=True)
            .use(
                anchors_plugin,
                min_level=1,
                max_level=6,
                slug_func=heading_anchor,
                permalink=True,
                permalinkSymbol="#",
                permalinkBefore=True,
            )
        )

    def _highlight(self, code: str, lang: str, attrs: str) -> str:
        # Empty string tells markdown-it to emit escaped plain code.
        if not lang or lang == "mermaid":
            return ""
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            logger.debug("No lexer for fenced code language %r", lang)
            return ""
        return highlight(code, lexer, self._formatter)

    @staticmethod
    def _promote_mermaid(html: str) -> str:
        return MERMAID_BLOCK.sub(
            lambda match: f'<div class="mermaid">{unescape(match.group(1)).strip()}</div>',
            html,
        )

    @staticmethod
    def _collect_headings(tokens) -> list[Heading]:
        headings: list[Heading] = []
        for idx, token in enumerate(tokens):
            if token.type != "heading_open":
                continue
            inline = tokens[idx + 1]
            text = "".join(
                child.content
                for child in inline.children or []
                if child.type in ("text", "code_inline")
            )
            text = " ".join(text.split())
            if not text:
                continue
            headings.append(
                Heading(level=int(token.tag[1]), text=text, anchor=token.attrGet("id"))
            )
        return headings

    def render_document(self, markdown: str) -> RenderedDocument:
        """Render *markdown* and return the HTML together with its headings."""
        env: dict = {}
        tokens = self._md.parse(markdown or "", env)
        html = self._md.renderer.render(tokens, self._md.options, env)
        return RenderedDocument(
            html=self._promote_mermaid(html),
            headings=self._collect_headings(tokens),
        )

    def render(self, markdown: str) -> str:
        return self.render_document(markdown).html

    def headings(self, markdown: str) -> list[Heading]:
        """Table of contents: every heading with its level, text and unique anchor."""
        return self._collect_headings(self._md.parse(markdown or ""))


renderer = MarkdownRenderer()


def get_renderer() -> MarkdownRenderer:
    return renderer
