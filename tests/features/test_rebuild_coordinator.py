import threading

import pytest

from dawg.features.chapters import gather
from dawg.features.rebuild import ChapterSnapshot, RebuildCoordinator, RebuildState
from dawg.features.render import ERROR_CSS_CLASS
from dawg.shared import SourceNotFoundError


class _BlockingGather:
    """Wraps ``gather`` so a test can hold a rebuild in flight."""

    def __init__(self):
        self.calls = 0
        self.entered = threading.Event()
        self.release = threading.Event()
        self.block = False

    def __call__(self, source, **kwargs):
        self.calls += 1
        if self.block:
            self.entered.set()
            assert self.release.wait(timeout=5.0)
        return gather(source, **kwargs)


def test_start_publishes_first_snapshot_synchronously(docs, quiet_logs):
    coordinator = RebuildCoordinator(docs, delay_s=0)
    assert coordinator.snapshot is None

    snapshot = coordinator.start()

    assert coordinator.snapshot is snapshot
    assert len(snapshot) == 2
    assert coordinator.rebuild_count == 1
    assert coordinator.state == RebuildState.IDLE
    assert snapshot.lookup("/").data.startswith("<!doctype html>")


def test_start_with_missing_source_raises(tmp_path, quiet_logs):
    coordinator = RebuildCoordinator(tmp_path / "missing", delay_s=0)
    with pytest.raises(SourceNotFoundError):
        coordinator.start()
    assert coordinator.snapshot is None
    assert coordinator.state == RebuildState.IDLE


def test_notify_rebuilds_with_new_chapter(docs, quiet_logs):
    coordinator = RebuildCoordinator(docs, delay_s=0)
    coordinator.start()

    (docs / "03-more.md").write_text("# More\n", encoding="utf-8")
    coordinator.notify("created", str(docs / "03-more.md"))

    assert coordinator.wait_idle(timeout=5.0)
    assert len(coordinator.snapshot) == 3
    assert coordinator.snapshot.lookup("/03-more").ok


def test_notifications_during_rebuild_coalesce_into_one(docs, quiet_logs):
    gather_fn = _BlockingGather()
    coordinator = RebuildCoordinator(docs, gather_fn=gather_fn, delay_s=0)
    coordinator.start()
    assert gather_fn.calls == 1

    gather_fn.block = True
    coordinator.notify("modified", "a")
    assert gather_fn.entered.wait(timeout=5.0)
    gather_fn.block = False

    # A burst of changes while the first rebuild is in flight.
    (docs / "03-more.md").write_text("# More\n", encoding="utf-8")
    for _ in range(5):
        coordinator.notify("modified", "b")
    gather_fn.release.set()

    assert coordinator.wait_idle(timeout=5.0)
    assert gather_fn.calls == 3
    assert coordinator.rebuild_count == 3
    assert len(coordinator.snapshot) == 3


def test_readers_keep_old_snapshot_until_publish(docs, quiet_logs):
    gather_fn = _BlockingGather()
    coordinator = RebuildCoordinator(docs, gather_fn=gather_fn, delay_s=0)
    before = coordinator.start()

    gather_fn.block = True
    (docs / "03-more.md").write_text("# More\n", encoding="utf-8")
    coordinator.notify()
    assert gather_fn.entered.wait(timeout=5.0)

    assert coordinator.snapshot is before
    assert coordinator.state == RebuildState.REBUILDING
    assert len(coordinator.snapshot) == 2

    gather_fn.release.set()
    assert coordinator.wait_idle(timeout=5.0)
    assert coordinator.snapshot is not before
    assert len(before) == 2


def test_one_broken_chapter_gets_placeholder(docs, quiet_logs):
    (docs / "03-broken.md").write_bytes(b"# Broken\n\xff\xfe")
    coordinator = RebuildCoordinator(docs, delay_s=0)

    snapshot = coordinator.start()

    assert len(snapshot) == 3
    assert [e.filename for e in snapshot.errors] == ["03-broken.md"]
    marker = f'class="{ERROR_CSS_CLASS}"'
    assert marker in snapshot.lookup("/03-broken").data
    assert marker not in snapshot.lookup("/01-intro").data


def test_malformed_middle_chapter_is_isolated(tmp_path, quiet_logs):
    source = tmp_path / "book"
    source.mkdir()
    (source / "01-a.md").write_text("# A\nHello", encoding="utf-8")
    (source / "02-b.md").write_bytes(b"# B\n\xc3\x28")
    (source / "03-c.md").write_text("# C\nWorld", encoding="utf-8")

    snapshot = RebuildCoordinator(source, delay_s=0).start()

    assert set(snapshot.rendered) == set(snapshot.chapters.ids)
    assert "Hello" in snapshot.lookup("/01-a").data
    assert "World" in snapshot.lookup("/03-c").data
    assert f'class="{ERROR_CSS_CLASS}"' in snapshot.lookup("/02-b").data
    assert [e.filename for e in snapshot.errors] == ["02-b.md"]


def test_failed_gather_keeps_previous_snapshot(docs, quiet_logs):
    coordinator = RebuildCoordinator(docs, delay_s=0)
    before = coordinator.start()

    for child in docs.iterdir():
        child.unlink()
    docs.rmdir()
    coordinator.notify("deleted", str(docs))

    assert coordinator.wait_idle(timeout=5.0)
    assert coordinator.snapshot is before
    assert coordinator.last_error is not None
    assert coordinator.rebuild_count == 1


def test_listeners_run_after_publish_and_failures_are_isolated(docs, quiet_logs):
    coordinator = RebuildCoordinator(docs, delay_s=0)
    seen = []

    def broken(_snapshot):
        raise RuntimeError("listener failure")

    coordinator.add_listener(broken)
    coordinator.add_listener(lambda snapshot: seen.append(snapshot is coordinator.snapshot))

    coordinator.start()
    coordinator.notify()
    assert coordinator.wait_idle(timeout=5.0)

    assert seen == [True, True]


def test_notify_templates_invalidates_cache(docs, quiet_logs, tmp_path):
    template = tmp_path / "page.html"
    template.write_text("v1 {{ chapter.title }}", encoding="utf-8")

    from dawg.features.render import RenderCache, Renderer

    coordinator = RebuildCoordinator(docs, Renderer(RenderCache(template)), delay_s=0)
    coordinator.start()
    assert coordinator.snapshot.lookup("/").data == "v1 Introduction"

    template.write_text("v2 {{ chapter.title }}", encoding="utf-8")
    coordinator.notify_templates("modified", str(template))

    assert coordinator.wait_idle(timeout=5.0)
    assert coordinator.snapshot.lookup("/").data == "v2 Introduction"


def test_snapshot_requires_every_chapter_rendered(docs):
    chapters = gather(docs)
    with pytest.raises(ValueError):
        ChapterSnapshot(chapters, {chapters[0].id: "<p>only one</p>"})


def test_snapshot_resolve_and_lookup(docs):
    chapters = gather(docs)
    snapshot = ChapterSnapshot(chapters, {c.id: f"page {c.name}" for c in chapters})

    assert snapshot.lookup("").data == "page 01-intro"
    assert snapshot.lookup("/").data == "page 01-intro"
    assert snapshot.lookup("02-setup").data == "page 02-setup"
    assert snapshot.lookup("/02-setup.md").data == "page 02-setup"
    assert snapshot.lookup("/nope").code == "NOT_FOUND"
    assert not ChapterSnapshot.empty().lookup("/").ok

    with pytest.raises(TypeError):
        snapshot.rendered["x"] = "y"


def test_dev_mode_compiles_assets_once_per_rebuild(docs, tmp_path, monkeypatch, quiet_logs):
    from dawg.features.render import RenderCache, Renderer
    from dawg.features.render import templating

    calls = []
    real_build_css = templating.build_css

    def counting_build_css(*args, **kwargs):
        calls.append(1)
        return real_build_css(*args, **kwargs)

    monkeypatch.setattr(templating, "build_css", counting_build_css)
    template = tmp_path / "page.html"
    template.write_text("v1 {{ chapter.title }}", encoding="utf-8")
    coordinator = RebuildCoordinator(docs, Renderer(RenderCache(template, dev=True)), delay_s=0)

    snapshot = coordinator.start()
    assert len(snapshot) == 2
    assert len(calls) == 1

    template.write_text("v2 {{ chapter.title }}", encoding="utf-8")
    coordinator.notify("modified", str(docs / "01-intro.md"))
    assert coordinator.wait_idle(timeout=5.0)

    assert len(calls) == 2
    assert {page.split(" ")[0] for page in coordinator.snapshot.rendered.values()} == {"v2"}
