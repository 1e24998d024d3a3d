import json

import pytest
from fastapi.testclient import TestClient

from api.deps import get_browser_runner, get_exporter
from api.main import create_app
from src.scrapers import config_runtime
from src.scrapers.x.collector import CollectorSettings
from src.scrapers.x.thread import ThreadExporter

from thread_fixtures import FakeHost, tweet_html

MAIN = tweet_html(name="Bob", handle="bob", status_id="99", text_html="<span>main post</span>")
REPLY = tweet_html(name="Amy", handle="amy", status_id="100", text_html="<span>a reply</span>")


@pytest.fixture
def events():
    return []


@pytest.fixture
def exporter(events):
    return ThreadExporter(
        publish=events.append,
        settings_factory=lambda: CollectorSettings(scroll_delay_ms=0, max_idle_attempts=2),
        include_engagement=False,
    )


@pytest.fixture
def runner_calls():
    return []


@pytest.fixture
def client(exporter, runner_calls):
    async def fake_runner(exp, url, *, headless=True, run=None):
        runner_calls.append({"url": url, "headless": headless})
        return await exp.export(FakeHost(passes=[[MAIN], [MAIN, REPLY]], url=url), run=run)

    app = create_app()
    app.dependency_overrides[get_exporter] = lambda: exporter
    app.dependency_overrides[get_browser_runner] = lambda: fake_runner
    with TestClient(app) as c:
        yield c


def test_export_runs_in_background_and_result_is_available(client, events, runner_calls):
    r = client.post("/thread/export", json={"url": "https://twitter.com/bob/status/99?s=20"})
    assert r.status_code == 202
    assert r.json() == {"ok": True}
    assert runner_calls == [{"url": "https://x.com/bob/status/99", "headless": True}]

    r = client.get("/thread/result")
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert body["reason"] == "idle"
    assert body["early_exit"] is False
    assert body["markdown"].startswith("## Bob (@bob)")
    assert [rec["handle"] for rec in body["records"]] == ["@bob", "@amy"]
    assert events[-1]["type"] == "result"


def test_result_404_before_any_export(client):
    assert client.get("/thread/result").status_code == 404


def test_export_rejects_foreign_url(client, runner_calls):
    r = client.post("/thread/export", json={"url": "https://example.com/bob/status/1"})
    assert r.status_code == 400
    assert runner_calls == []


def test_export_requires_url(client):
    assert client.post("/thread/export", json={"url": "   "}).status_code == 422


def test_second_export_while_running_conflicts(client, exporter, runner_calls):
    exporter.begin("https://x.com/bob/status/99")
    r = client.post("/thread/export", json={"url": "https://x.com/bob/status/99"})
    assert r.status_code == 409
    assert runner_calls == []


def test_ping_and_stop(client, exporter):
    assert client.get("/thread/ping").json() == {"ok": True, "is_scrolling": False}

    run = exporter.begin("https://x.com/bob/status/99")
    assert client.get("/thread/ping").json() == {"ok": True, "is_scrolling": True}
    assert client.post("/thread/stop").json() == {"ok": True}
    assert run.cancel.is_cancelled() is True


def test_health_reports_activity(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["is_scrolling"] is False
    assert body["registry_version"] == "x-thread-1"


def test_config_read_and_override(client, tmp_path, monkeypatch):
    monkeypatch.setattr(config_runtime, "OVERRIDES_PATH", str(tmp_path / "overrides.json"))
    config_runtime.effective_config(refresh=True)
    try:
        x = client.get("/config/scrapers/x").json()
        assert x["thread"]["max_idle_attempts"] == 15

        r = client.put("/config/scrapers/x", json={"thread": {"max_idle_attempts": 8}})
        assert r.status_code == 200
        assert r.json()["thread"]["max_idle_attempts"] == 8
        assert r.json()["thread"]["scroll_delay_ms"] == 2500

        saved = json.loads((tmp_path / "overrides.json").read_text(encoding="utf-8"))
        assert saved == {"x": {"thread": {"max_idle_attempts": 8}}}
        assert client.get("/config/scrapers/facebook").status_code == 404
    finally:
        monkeypatch.undo()
        config_runtime.effective_config(refresh=True)


def test_bad_override_does_not_break_later_exports(client, tmp_path, monkeypatch):
    monkeypatch.setattr(config_runtime, "OVERRIDES_PATH", str(tmp_path / "overrides.json"))
    config_runtime.effective_config(refresh=True)
    events = []
    configured = ThreadExporter(publish=events.append, settings_factory=CollectorSettings.from_config)
    client.app.dependency_overrides[get_exporter] = lambda: configured
    try:
        r = client.put("/config/scrapers/x", json={"thread": {"max_idle_attempts": "lots", "scroll_delay_ms": 0}})
        assert r.status_code == 200

        r = client.post("/thread/export", json={"url": "https://x.com/bob/status/99"})
        assert r.status_code == 202
        assert configured.last_outcome.count == 2
        assert configured.last_outcome.cycles == 15
        assert events[-1]["type"] == "result"
    finally:
        monkeypatch.undo()
        config_runtime.effective_config(refresh=True)
