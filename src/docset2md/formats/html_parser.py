"""HTML documentation pages to structured content and markdown."""

from __future__ import annotations

import copy
import re

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

from docset2md.models import LinkMapping, Parameter, ParsedContent


_WHITESPACE_RE = re.compile(r"\s+")
_BLANK_LINES_RE = re.compile(r"\n[ \t]*(?=\n)")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_LANGUAGE_CLASS_RE = re.compile(r"language-(\w+)")

_CHROME_SELECTOR = "nav, header, footer, .sidebar, .navigation, .menu"
_CONTENT_NOISE_SELECTOR = "nav, header, footer, script, style, .sidebar, .navigation"
_DROP_TAGS = {"script", "style", "noscript", "head", "title", "meta", "link"}
_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_BLOCK_TAGS = _HEADING_TAGS | {
    "address", "article", "aside", "blockquote", "body", "dd", "details", "div", "dl", "dt",
    "figure", "footer", "form", "header", "hr", "html", "li", "main", "nav", "ol", "p", "pre",
    "section", "summary", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
}

_DECLARATION_SELECTORS = (
    ".declaration code",
    ".signature code",
    ".prototype code",
    ".methodsynopsis",
    ".funcsynopsis",
    "pre.declaration",
    "pre.signature",
    ".api-signature code",
)
_DECLARATION_HINTS = ("function", "class", "def ", "void", "int ", "->")
_CONTENT_SELECTORS = (
    "main",
    "article",
    ".content",
    ".documentation",
    ".doc-content",
    "#content",
    ".main-content",
)
_RETURN_SELECTORS = (".return-value", ".returns", ".return")


def _text(node: Tag | None) -> str:
    if node is None:
        return ""
    return _WHITESPACE_RE.sub(" ", node.get_text()).strip()


def _is_block(node: object) -> bool:
    return isinstance(node, Tag) and node.name in _BLOCK_TAGS


def _indent_continuation(body: str, width: int) -> str:
    lines = body.split("\n")
    indented = [lines[0]]
    for line in lines[1:]:
        indented.append(" " * width + line if line.strip() else "")
    return "\n".join(indented)


class HtmlParser:
    """Extract title, abstract, signature and body from documentation HTML.

    When a link map is installed through `set_link_context`, relative links
    to ``.html`` pages that belong to the docset are rewritten to the
    corresponding markdown output paths, relative to the type directory of
    the page being converted.
    """

    def __init__(self) -> None:
        self._link_map: dict[str, LinkMapping] | None = None
        self._current_type_dir: str | None = None

    def set_link_context(self, link_map: dict[str, LinkMapping] | None, current_type_dir: str | None) -> None:
        self._link_map = link_map
        self._current_type_dir = current_type_dir

    def parse(self, html: str, name: str, entry_type: str) -> ParsedContent:
        soup = BeautifulSoup(html, "lxml")
        for element in soup.select(_CHROME_SELECTOR):
            element.decompose()

        return ParsedContent(
            title=self._extract_title(soup) or name,
            type=entry_type,
            abstract=self._extract_abstract(soup),
            declaration=self._extract_declaration(soup),
            description=self._extract_description(soup),
            parameters=self._extract_parameters(soup),
            return_value=self._extract_return_value(soup),
        )

    def html_to_markdown(self, html: str) -> str:
        soup = BeautifulSoup(html, "lxml")
        root = soup.body or soup
        return self._finalize(self._render_children(root))

    def _extract_title(self, soup: BeautifulSoup) -> str | None:
        h1_text = _text(soup.find("h1"))
        if h1_text:
            return h1_text

        title_text = _text(soup.find("title"))
        if title_text:
            return title_text.split(" - ")[0].split(" | ")[0].strip()

        og_title = soup.find("meta", attrs={"property": "og:title"})
        if og_title is not None and og_title.get("content"):
            return str(og_title["content"]).strip()
        return None

    def _extract_abstract(self, soup: BeautifulSoup) -> str | None:
        for attrs in ({"name": "description"}, {"property": "og:description"}):
            meta = soup.find("meta", attrs=attrs)
            if meta is not None and meta.get("content"):
                return str(meta["content"]).strip()

        h1 = soup.find("h1")
        if h1 is not None:
            paragraph = h1.find_next_sibling("p")
            text = _text(paragraph)
            if 10 < len(text) < 500:
                return text

        summary = soup.select_one(".description, .summary, .brief")
        if summary is not None:
            return _text(summary)
        return None

    def _extract_declaration(self, soup: BeautifulSoup) -> str | None:
        for selector in _DECLARATION_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            text = element.get_text().strip()
            if 0 < len(text) < 1000:
                return text

        first_code = soup.select_one("pre code")
        if first_code is not None:
            text = first_code.get_text().strip()
            if len(text) < 500 and any(hint in text for hint in _DECLARATION_HINTS):
                return text
        return None

    def _extract_description(self, soup: BeautifulSoup) -> str | None:
        content: Tag | None = None
        for selector in _CONTENT_SELECTORS:
            element = soup.select_one(selector)
            if element is not None and len(element.get_text().strip()) > 100:
                content = element
                break

        if content is None:
            content = soup.body
        if content is None:
            return None

        clone = copy.copy(content)
        for element in clone.select(_CONTENT_NOISE_SELECTOR):
            element.decompose()

        markdown = self._finalize(self._render_children(clone))
        return markdown or None

    def _extract_parameters(self, soup: BeautifulSoup) -> list[Parameter]:
        parameters: list[Parameter] = []

        terms = soup.select(".parameters dt, .params dt, .arguments dt")
        definitions = soup.select(".parameters dd, .params dd, .arguments dd")
        if terms and len(terms) == len(definitions):
            for term, definition in zip(terms, definitions):
                name = _text(term)
                description = _text(definition)
                if name and description:
                    parameters.append(Parameter(name=name, description=description))

        if not parameters:
            for row in soup.select("table.params tr, .parameters table tr"):
                cells = row.find_all("td")
                if len(cells) < 2:
                    continue
                name = _text(cells[0])
                description = _text(cells[1])
                if name and description:
                    parameters.append(Parameter(name=name, description=description))

        return parameters

    def _extract_return_value(self, soup: BeautifulSoup) -> str | None:
        for selector in _RETURN_SELECTORS:
            text = _text(soup.select_one(selector))
            if text:
                return text

        for term in soup.find_all("dt"):
            if "Return" not in term.get_text():
                continue
            definition = term.find_next_sibling()
            if definition is not None and definition.name == "dd":
                text = _text(definition)
                if text:
                    return text
        return None

    def _resolve_href(self, href: str) -> str:
        if not self._link_map or "://" in href or href.startswith(("#", "mailto:")):
            return href

        path = href.split("#", 1)[0]
        filename = path.rsplit("/", 1)[-1]
        mapping = self._link_map.get(filename)
        if mapping is None:
            return href

        target_dir, _, target_file = mapping.output_path.rpartition("/")
        if target_dir == self._current_type_dir:
            return f"./{target_file}"
        return f"../{mapping.output_path}"

    def _render_children(self, node: Tag) -> str:
        parts: list[str] = []
        children = list(node.children)
        for index, child in enumerate(children):
            if isinstance(child, Comment):
                continue
            if isinstance(child, NavigableString):
                text = _WHITESPACE_RE.sub(" ", str(child))
                if index == 0 or _is_block(children[index - 1]):
                    text = text.lstrip()
                if index == len(children) - 1 or _is_block(children[index + 1]):
                    text = text.rstrip()
                parts.append(text)
            elif isinstance(child, Tag):
                parts.append(self._render_tag(child))
        return "".join(parts)

    def _render_tag(self, node: Tag) -> str:
        name = node.name
        if name in _DROP_TAGS:
            return ""
        if name in _HEADING_TAGS:
            text = self._render_children(node).strip()
            return f"\n\n{'#' * int(name[1])} {text}\n\n" if text else ""
        if name == "p":
            text = self._render_children(node).strip()
            return f"\n\n{text}\n\n" if text else ""
        if name == "br":
            return "  \n"
        if name == "hr":
            return "\n\n---\n\n"
        if name == "pre":
            return self._render_pre(node)
        if name == "code":
            text = node.get_text()
            return f"`{text}`" if text else ""
        if name in ("strong", "b"):
            text = self._render_children(node).strip()
            return f"**{text}**" if text else ""
        if name in ("em", "i"):
            text = self._render_children(node).strip()
            return f"*{text}*" if text else ""
        if name == "a":
            text = self._render_children(node).strip()
            href = node.get("href")
            if not href or not text:
                return text
            return f"[{text}]({self._resolve_href(str(href))})"
        if name == "img":
            src = node.get("src")
            return f"![{node.get('alt', '')}]({src})" if src else ""
        if name in ("ul", "ol"):
            return self._render_list(node)
        if name == "blockquote":
            body = self._finalize(self._render_children(node))
            quoted = "\n".join(f"> {line}" if line else ">" for line in body.split("\n"))
            return f"\n\n{quoted}\n\n"
        if name == "table":
            return self._render_table(node)
        if name == "dt":
            text = self._render_children(node).strip()
            return f"\n\n**{text}**\n\n" if text else ""
        if name in _BLOCK_TAGS:
            return f"\n\n{self._render_children(node)}\n\n"
        return self._render_children(node)

    def _render_pre(self, node: Tag) -> str:
        code = node.find("code")
        language = ""
        if isinstance(code, Tag):
            match = _LANGUAGE_CLASS_RE.search(" ".join(code.get("class", [])))
            if match:
                language = match.group(1)
        text = (code if isinstance(code, Tag) else node).get_text().strip()
        return f"\n\n```{language}\n{text}\n```\n\n"

    def _render_list(self, node: Tag) -> str:
        ordered = node.name == "ol"
        start = int(node.get("start", 1)) if ordered and str(node.get("start", "1")).isdigit() else 1
        lines: list[str] = []
        for position, item in enumerate(node.find_all("li", recursive=False)):
            marker = f"{start + position}. " if ordered else "- "
            body = self._finalize(self._render_children(item))
            lines.append(marker + _indent_continuation(body, len(marker)))
        if not lines:
            return ""
        return "\n\n" + "\n".join(lines) + "\n\n"

    def _render_table(self, node: Tag) -> str:
        rows: list[list[str]] = []
        for row in node.find_all("tr"):
            cells = [
                self._finalize(self._render_children(cell)).replace("\n", " ").replace("|", "\\|")
                for cell in row.find_all(["th", "td"], recursive=False)
            ]
            if cells:
                rows.append(cells)
        if not rows:
            return ""

        width = max(len(row) for row in rows)
        lines = []
        for index, row in enumerate(rows):
            padded = row + [""] * (width - len(row))
            lines.append("| " + " | ".join(padded) + " |")
            if index == 0:
                lines.append("| " + " | ".join(["---"] * width) + " |")
        return "\n\n" + "\n".join(lines) + "\n\n"

    @staticmethod
    def _finalize(markdown: str) -> str:
        cleaned = _BLANK_LINES_RE.sub("\n", markdown)
        cleaned = _EXCESS_NEWLINES_RE.sub("\n\n", cleaned)
        return cleaned.strip()
