import json

import pytest

from site_crawler.core import CrawlResult
from site_crawler.errors import ConfigError
from site_crawler.sinks import JsonSink, UrlListSink, load_urls, sink_for_path

RESULTS = [
    CrawlResult(url="https://s.test/", depth=0, timestamp="2026-01-01T00:00:00+00:00"),
    CrawlResult(url="https://s.test/a", depth=1, timestamp="2026-01-01T00:00:01+00:00"),
]


def test_url_list_sink_creates_parents(tmp_path):
    out = tmp_path / "data" / "urls.txt"
    UrlListSink().save(RESULTS, out)
    assert out.read_text(encoding="utf-8") == "https://s.test/\nhttps://s.test/a\n"


def test_url_list_sink_empty(tmp_path):
    out = tmp_path / "urls.txt"
    UrlListSink().save([], out)
    assert out.read_text(encoding="utf-8") == ""


def test_json_sink(tmp_path):
    out = tmp_path / "crawl.json"
    JsonSink(pretty=True).save(RESULTS, out)
    assert json.loads(out.read_text(encoding="utf-8")) == [
        {"url": "https://s.test/", "depth": 0, "timestamp": "2026-01-01T00:00:00+00:00"},
        {"url": "https://s.test/a", "depth": 1, "timestamp": "2026-01-01T00:00:01+00:00"},
    ]


def test_json_sink_to_stdout(capsys):
    JsonSink().save(RESULTS[:1], "-")
    assert json.loads(capsys.readouterr().out)[0]["url"] == "https://s.test/"


def test_sink_for_path():
    assert isinstance(sink_for_path("out/crawl.JSON"), JsonSink)
    assert isinstance(sink_for_path("data/urls.txt"), UrlListSink)
    assert isinstance(sink_for_path("data/urls.txt", "json"), JsonSink)
    with pytest.raises(ConfigError):
        sink_for_path("x", "csv")


def test_round_trip_through_load_urls(tmp_path):
    out = tmp_path / "urls.txt"
    UrlListSink().save(RESULTS, out)
    assert load_urls(out) == ["https://s.test/", "https://s.test/a"]


def test_load_urls_skips_comments_and_blanks(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text("# seeds\n\n  https://s.test/x  \n#https://s.test/skip\n", encoding="utf-8")
    assert load_urls(path) == ["https://s.test/x"]


def test_load_urls_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_urls(tmp_path / "nope.txt")
