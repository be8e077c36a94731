import pytest

from dawg.features.chapters import Chapter, ChapterStore, gather
from dawg.features.render import ERROR_CSS_CLASS, RenderCache, Renderer, build_css, list_chapters, render_markdown
from dawg.shared import ChapterRenderError


def test_render_markdown_highlights_code_and_builds_toc():
    body, toc = render_markdown("# Title\n\n## Part\n\n```python\nx = 1\n```\n")

    assert '<h1 id="title">Title</h1>' in body
    assert 'class="codehilite"' in body
    assert "<span" in body
    assert 'href="#part"' in toc


def test_render_markdown_unknown_language_is_plain():
    body, _toc = render_markdown("```\nplain text\n```\n")
    assert "plain text" in body


def test_build_css_concatenates_and_compresses(tmp_path):
    a = tmp_path / "a.css"
    b = tmp_path / "b.css"
    a.write_text("body {\n  color: red;\n}\n", encoding="utf-8")
    b.write_text("p {\n  margin: 0;\n}\n", encoding="utf-8")

    raw = build_css([a, b, tmp_path / "missing.css"], compress=False, pygments_style=None)
    assert raw.index("/* a.css */") < raw.index("/* b.css */")
    assert "color: red" in raw

    compressed = build_css([a, b], compress=True, pygments_style=None)
    assert "body{color:red}" in compressed
    assert "/*" not in compressed


def test_build_css_appends_pygments_rules(tmp_path):
    css = build_css([], compress=False, pygments_style="default")
    assert ".codehilite" in css


def test_list_chapters_escapes_titles(tmp_path):
    path = tmp_path / "01-a.md"
    path.write_text("# <A & B>\n", encoding="utf-8")
    chapters = ChapterStore([Chapter(str(path), index=1)])

    html = list_chapters(chapters, "Chapters")

    assert "<h1>Chapters</h1>" in html
    assert '<a href="01-a.md">&lt;A &amp; B&gt;</a>' in html


def test_renderer_produces_full_page(docs):
    chapters = gather(docs)
    page = Renderer().render(chapters[1], chapters)

    assert page.startswith("<!doctype html>")
    assert "<title>Setup</title>" in page
    assert '<style type="text/css" media="screen">' in page
    assert 'class="codehilite"' in page
    assert 'href="01-intro.md"' in page
    assert "Introduction" in page


def test_renderer_wraps_unreadable_chapter(tmp_path):
    bad = tmp_path / "bad.md"
    bad.write_bytes(b"\xff\xfe")
    chapters = ChapterStore([Chapter(str(bad), index=1)])

    with pytest.raises(ChapterRenderError):
        Renderer().render(chapters[0], chapters)


def test_render_error_page_masks_paths(tmp_path):
    path = tmp_path / "01-a.md"
    path.write_text("# A\n", encoding="utf-8")
    chapters = ChapterStore([Chapter(str(path), index=1)])
    exc = ChapterRenderError(f"Could not read {path}")

    page = Renderer().render_error(chapters[0], chapters, exc)

    assert f'class="{ERROR_CSS_CLASS}"' in page
    assert str(path) not in page
    assert "[path]" in page


def test_custom_template_and_missing_template_fallback(tmp_path, docs, quiet_logs):
    template = tmp_path / "page.html"
    template.write_text("<p>{{ chapter.title }}|{{ content }}</p>", encoding="utf-8")
    chapters = gather(docs)

    page = Renderer(RenderCache(template)).render(chapters[0], chapters)
    assert page.startswith("<p>Introduction|<h1")

    fallback = RenderCache(tmp_path / "missing.html")
    assert fallback.template_path.name == "template.html"


def test_cache_is_reused_until_invalidated(tmp_path):
    template = tmp_path / "page.html"
    template.write_text("one", encoding="utf-8")
    cache = RenderCache(template)

    first = cache.template()
    template.write_text("two", encoding="utf-8")
    assert cache.template() is first
    assert cache.template().render() == "one"

    cache.invalidate()
    assert cache.template().render() == "two"


def test_dev_cache_keeps_compiled_template_until_invalidated(tmp_path):
    template = tmp_path / "page.html"
    style = tmp_path / "s.css"
    template.write_text("one", encoding="utf-8")
    style.write_text("a { color: red; }", encoding="utf-8")
    cache = RenderCache(template, [style], dev=True)

    assert cache.template().render() == "one"
    template.write_text("two", encoding="utf-8")
    assert cache.template().render() == "one"
    cache.invalidate()
    assert cache.template().render() == "two"
    # No minification in dev mode.
    assert "/* s.css */" in cache.styling()
    assert cache.watch_paths() == [template, style]
