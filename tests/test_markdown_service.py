import pytest

from patternhub.services.markdown_service import MarkdownRenderer, heading_anchor


@pytest.fixture
def renderer():
    return MarkdownRenderer()


SAMPLE = """# Observer

- [x] done
- [ ] todo

| Name | Role |
|------|------|
| John | Subject |

```mermaid
graph TD
    A --> B
```

See https://example.com for more.
"""


def test_render_is_deterministic(renderer):
    assert renderer.render(SAMPLE) == renderer.render(SAMPLE)


def test_empty_input_renders_empty(renderer):
    assert renderer.render("") == ""


def test_basic_heading_and_paragraph(renderer):
    html = renderer.render("# Hello World\n\nSome *text*.")
    assert "<h1" in html
    assert "Hello World" in html
    assert "<em>text</em>" in html


def test_mermaid_block_becomes_div(renderer):
    html = renderer.render("```mermaid\ngraph TD\n    A --> B\n```\n")
    assert '<div class="mermaid">graph TD\n    A --> B</div>' in html
    assert "language-mermaid" not in html
    assert "<pre>" not in html


def test_mermaid_entities_are_decoded(renderer):
    html = renderer.render('```mermaid\ngraph LR\n    A["x & y"] --> B<br/>C\n```\n')
    assert 'A["x & y"] --> B<br/>C' in html
    assert "&amp;" not in html
    assert "&quot;" not in html


def test_mermaid_whitespace_is_trimmed(renderer):
    html = renderer.render("```mermaid\n\n  graph TD\n\n```\n")
    assert '<div class="mermaid">graph TD</div>' in html


def test_several_mermaid_blocks_are_converted_independently(renderer):
    source = "```mermaid\ngraph A\n```\n\ntext\n\n```mermaid\ngraph B\n```\n"
    html = renderer.render(source)
    assert html.count('<div class="mermaid">') == 2
    assert '<div class="mermaid">graph A</div>' in html
    assert '<div class="mermaid">graph B</div>' in html


def test_non_mermaid_code_stays_escaped(renderer):
    html = renderer.render("```\n<x> & y\n```\n")
    assert "<pre><code>&lt;x&gt; &amp; y\n</code></pre>" in html
    assert "mermaid" not in html


def test_known_language_is_highlighted(renderer):
    html = renderer.render("```python\nprint('hi')\n```\n")
    assert '<pre><code class="language-python">' in html
    assert "<span" in html
    assert "print" in html


def test_unknown_language_degrades_to_plain_code(renderer):
    html = renderer.render("```nosuchlang\n<b>bold</b>\n```\n")
    assert '<code class="language-nosuchlang">' in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html


def test_table(renderer):
    html = renderer.render("| Name | Age |\n|------|-----|\n| John | 30 |\n")
    assert "<table>" in html
    assert "<th>Name</th>" in html
    assert "<td>John</td>" in html


def test_task_list_checkboxes_are_labelled(renderer):
    html = renderer.render("- [x] Completed task\n- [ ] Open task\n")
    assert html.count('type="checkbox"') == 2
    assert html.count('checked="checked"') == 1
    assert "<label>" in html
    assert "Completed task" in html


def test_strikethrough(renderer):
    assert "<s>gone</s>" in renderer.render("~~gone~~")


def test_bare_urls_are_autolinked(renderer):
    html = renderer.render("Visit https://example.com today")
    assert '<a href="https://example.com">https://example.com</a>' in html


def test_raw_html_is_escaped(renderer):
    html = renderer.render("<script>alert(1)</script>\n\nand <b>inline</b>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "<b>" not in html


def test_javascript_links_are_not_emitted(renderer):
    html = renderer.render("[click](javascript:alert(1))")
    assert 'href="javascript:' not in html


def test_deep_nesting_is_capped(renderer):
    html = renderer.render(">" * 200 + " deep")
    assert html.count("<blockquote>") < 200


def test_headings_get_unique_anchors(renderer):
    source = "# Intro\n\n## Usage\n\n## Usage\n\n```\n# not a heading\n```\n"
    headings = renderer.headings(source)

    assert [(h.level, h.text, h.anchor) for h in headings] == [
        (1, "Intro", "intro"),
        (2, "Usage", "usage"),
        (2, "Usage", "usage-1"),
    ]
    html = renderer.render(source)
    assert 'id="usage-1"' in html
    assert 'href="#usage-1"' in html


def test_heading_text_includes_inline_code(renderer):
    headings = renderer.headings("## Use `Factory` here")
    assert headings[0].text == "Use Factory here"
    assert headings[0].anchor == "use-factory-here"


def test_render_document_matches_separate_calls(renderer):
    document = renderer.render_document(SAMPLE)
    assert document.html == renderer.render(SAMPLE)
    assert document.headings == renderer.headings(SAMPLE)


@pytest.mark.parametrize(
    "title, anchor",
    [
        ("Hello, World", "hello-world"),
        ("单例 模式", "单例-模式"),
        ("  Factory   Method  ", "factory-method"),
        ("!!!", "section"),
    ],
)
def test_heading_anchor(title, anchor):
    assert heading_anchor(title) == anchor


def test_mermaid_markup_is_literal_but_other_code_is_not(renderer):
    html = renderer.render('```mermaid\ngraph TD\n    A["<x>"]\n```\n\n```\n<x>\n```\n')
    assert '<div class="mermaid">graph TD\n    A["<x>"]</div>' in html
    assert "<pre><code>&lt;x&gt;\n</code></pre>" in html
