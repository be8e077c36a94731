import pytest

from dawg.features.chapters import gather
from dawg.features.publish import is_file_destination, rewrite_links, write_snapshot
from dawg.features.rebuild import ChapterSnapshot, RebuildCoordinator
from dawg.shared import AmbiguousDestinationError


@pytest.fixture
def snapshot(docs, quiet_logs):
    return RebuildCoordinator(docs, delay_s=0).start()


def test_rewrite_links_targets_html_pages(docs):
    chapters = gather(docs)
    html = (
        '<a href="02-setup.md">a</a>'
        "<a href='./01-intro.md#top'>b</a>"
        '<a href="02-setup.md?x=1">c</a>'
        '<a href="other.md">d</a>'
        '<a href="https://example.com/02-setup.md">e</a>'
        '<img src="02-setup.md">'
    )

    out = rewrite_links(html, chapters)

    assert '<a href="02-setup.html">a</a>' in out
    assert "<a href='01-intro.html#top'>b</a>" in out
    assert '<a href="02-setup.html?x=1">c</a>' in out
    assert '<a href="other.md">d</a>' in out
    assert '<a href="https://example.com/02-setup.md">e</a>' in out
    assert '<img src="02-setup.html">' in out


def test_write_snapshot_writes_one_page_per_chapter(snapshot, tmp_path):
    out = tmp_path / "site"

    written = write_snapshot(snapshot, out)

    assert [p.name for p in written] == ["01-intro.html", "02-setup.html"]
    intro = (out / "01-intro.html").read_text(encoding="utf-8")
    setup = (out / "02-setup.html").read_text(encoding="utf-8")
    assert 'href="02-setup.html"' in intro
    assert 'href="01-intro.html#introduction"' in setup
    assert 'href="01-intro.md"' not in setup


def test_write_snapshot_is_idempotent(snapshot, tmp_path):
    out = tmp_path / "site"
    write_snapshot(snapshot, out)
    first = {p.name: p.read_bytes() for p in out.iterdir()}

    write_snapshot(snapshot, out)

    assert {p.name: p.read_bytes() for p in out.iterdir()} == first


def test_write_snapshot_clear_removes_stale_files(snapshot, tmp_path):
    out = tmp_path / "site"
    out.mkdir()
    (out / "stale.html").write_text("old", encoding="utf-8")

    write_snapshot(snapshot, out)
    assert (out / "stale.html").exists()

    write_snapshot(snapshot, out, clear=True)
    assert sorted(p.name for p in out.iterdir()) == ["01-intro.html", "02-setup.html"]


def test_file_destination_with_several_chapters_is_ambiguous(snapshot, tmp_path):
    dest = tmp_path / "out" / "book.html"

    with pytest.raises(AmbiguousDestinationError) as excinfo:
        write_snapshot(snapshot, dest)

    assert excinfo.value.code == "AMBIGUOUS_DESTINATION"
    assert not dest.exists()
    assert not (tmp_path / "out").exists()


def test_single_chapter_to_file_destination(docs, tmp_path, quiet_logs):
    snapshot = RebuildCoordinator(docs / "01-intro.md", delay_s=0).start()
    dest = tmp_path / "intro.html"

    written = write_snapshot(snapshot, dest)

    assert written == [dest.absolute()]
    assert dest.read_text(encoding="utf-8").startswith("<!doctype html>")


def test_empty_snapshot_creates_directory(tmp_path, quiet_logs):
    out = tmp_path / "empty"
    assert write_snapshot(ChapterSnapshot.empty(), out) == []
    assert out.is_dir()


def test_is_file_destination(tmp_path):
    existing = tmp_path / "site.v2"
    existing.mkdir()

    assert is_file_destination(tmp_path / "page.html")
    assert not is_file_destination(tmp_path / "site")
    assert not is_file_destination(existing)
