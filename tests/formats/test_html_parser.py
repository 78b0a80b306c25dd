from __future__ import annotations

from docset2md.formats.html_parser import HtmlParser
from docset2md.models import LinkMapping


_LONG_TEXT = "This function applies the callback to every element of the given arrays and returns the results. " * 2

_PAGE = f"""
<html>
  <head>
    <title>array_map - PHP Manual</title>
    <meta name="description" content="Applies the callback to the elements of the given arrays">
  </head>
  <body>
    <nav>Skip me</nav>
    <div class="content">
      <h1>array_map</h1>
      <div class="methodsynopsis">array_map(?callable $callback, array $array): array</div>
      <p>{_LONG_TEXT}</p>
      <dl class="parameters">
        <dt>callback</dt><dd>A callable to run for each element.</dd>
        <dt>array</dt><dd>An array to run through the callback.</dd>
      </dl>
      <div class="returns">Returns an array containing the results.</div>
      <p>See <a href="function.array-filter.html#example">array_filter</a> and
         <a href="class.arrayobject.html">ArrayObject</a> or <a href="https://php.net">php.net</a>.</p>
    </div>
  </body>
</html>
"""


def test_parse_extracts_structured_fields() -> None:
    content = HtmlParser().parse(_PAGE, "array_map", "Function")

    assert content.title == "array_map"
    assert content.type == "Function"
    assert content.abstract == "Applies the callback to the elements of the given arrays"
    assert content.declaration == "array_map(?callable $callback, array $array): array"
    assert [parameter.name for parameter in content.parameters] == ["callback", "array"]
    assert content.parameters[0].description == "A callable to run for each element."
    assert content.return_value == "Returns an array containing the results."
    assert content.description is not None
    assert "# array_map" in content.description
    assert "Skip me" not in content.description


def test_parse_falls_back_to_title_tag_and_entry_name() -> None:
    parser = HtmlParser()

    from_title = parser.parse("<html><head><title>strlen | Docs</title></head><body></body></html>", "x", "Function")
    from_name = parser.parse("<html><body><p>short</p></body></html>", "fallback", "Guide")

    assert from_title.title == "strlen"
    assert from_name.title == "fallback"


def test_links_are_rewritten_through_the_link_map() -> None:
    parser = HtmlParser()
    parser.set_link_context(
        {
            "function.array-filter.html": LinkMapping("function/array_filter.md", "Function", "array_filter"),
            "class.arrayobject.html": LinkMapping("class/arrayobject.md", "Class", "ArrayObject"),
        },
        "function",
    )

    content = parser.parse(_PAGE, "array_map", "Function")

    assert content.description is not None
    assert "[array_filter](./array_filter.md)" in content.description
    assert "[ArrayObject](../class/arrayobject.md)" in content.description
    assert "[php.net](https://php.net)" in content.description


def test_links_are_left_alone_without_a_link_map() -> None:
    content = HtmlParser().parse(_PAGE, "array_map", "Function")

    assert content.description is not None
    assert "[array_filter](function.array-filter.html#example)" in content.description


def test_html_to_markdown_renders_common_blocks() -> None:
    html = (
        "<h2>Title</h2>"
        "<p>Hello <strong>bold</strong> and <code>x()</code></p>"
        '<pre><code class="language-python">print(1)\n</code></pre>'
        "<ul><li>one</li><li>two</li></ul>"
    )

    markdown = HtmlParser().html_to_markdown(html)

    assert markdown == "## Title\n\nHello **bold** and `x()`\n\n```python\nprint(1)\n```\n\n- one\n- two"


def test_html_to_markdown_renders_tables_and_ordered_lists() -> None:
    html = (
        "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2|3</td></tr></table>"
        "<ol><li>first</li><li>second</li></ol>"
    )

    markdown = HtmlParser().html_to_markdown(html)

    assert "| A | B |\n| --- | --- |\n| 1 | 2\\|3 |" in markdown
    assert "1. first\n2. second" in markdown


def test_html_to_markdown_drops_scripts_and_styles() -> None:
    markdown = HtmlParser().html_to_markdown("<script>alert(1)</script><style>p{}</style><p>kept</p>")

    assert markdown == "kept"
