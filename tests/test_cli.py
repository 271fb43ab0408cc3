import json

import pytest

from site_crawler import cli
from site_crawler.errors import AcquisitionError


@pytest.fixture
def sites_file(tmp_path):
    path = tmp_path / "sites.json"
    path.write_text(json.dumps({
        "local": {
            "baseUrl": "https://s.test/",
            "maxDepth": 2,
            "allowedPaths": ["/"],
            "excludedPaths": ["/private"],
            "crawlDelay": 0,
        },
    }), encoding="utf-8")
    return path


@pytest.fixture
def fake_renderer(monkeypatch, make_renderer):
    renderer = make_renderer({
        "https://s.test/": ["https://s.test/a", "https://s.test/private/b"],
        "https://s.test/a": ["https://s.test/a/1"],
        "https://s.test/a/1": [],
    })

    class FakeHttpRenderer:
        def __init__(self, config=None):
            self.config = config
            renderer.config = config

        def __enter__(self):
            return renderer

        def __exit__(self, *exc_info):
            renderer.released = True

    monkeypatch.setattr(cli, "HttpRenderer", FakeHttpRenderer)
    return renderer


def test_crawl_writes_url_list(tmp_path, sites_file, fake_renderer):
    out = tmp_path / "urls.txt"
    code = cli.main(["local", "--sites-file", str(sites_file), "--output", str(out)])

    assert code == 0
    assert out.read_text(encoding="utf-8").splitlines() == [
        "https://s.test/",
        "https://s.test/a",
        "https://s.test/a/1",
    ]
    assert fake_renderer.released


def test_max_depth_override_and_json(tmp_path, sites_file, fake_renderer):
    out = tmp_path / "crawl.json"
    code = cli.main([
        "local", "--sites-file", str(sites_file), "--output", str(out),
        "--max-depth", "1", "--timeout", "5", "--verbose",
    ])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert [(p["url"], p["depth"]) for p in payload] == [("https://s.test/", 0), ("https://s.test/a", 1)]
    assert fake_renderer.config.navigation_timeout == 5000


def test_list_sites(capsys, sites_file):
    assert cli.main(["--list-sites", "--sites-file", str(sites_file)]) == 0
    assert capsys.readouterr().out.split() == ["example", "local"]


def test_unknown_site_fails(tmp_path):
    assert cli.main(["missing", "--output", str(tmp_path / "x.txt")]) == 1


def test_invalid_depth_fails(tmp_path, sites_file):
    code = cli.main(["local", "--sites-file", str(sites_file), "--max-depth", "-1", "--output", str(tmp_path / "x.txt")])
    assert code == 1


def test_missing_site_argument_exits():
    with pytest.raises(SystemExit):
        cli.main([])


def test_acquisition_failure_fails(tmp_path, sites_file, monkeypatch):
    class FailingRenderer:
        def __init__(self, config=None):
            pass

        def __enter__(self):
            raise AcquisitionError("cannot start renderer")

        def __exit__(self, *exc_info):
            pass

    monkeypatch.setattr(cli, "HttpRenderer", FailingRenderer)
    out = tmp_path / "urls.txt"
    assert cli.main(["local", "--sites-file", str(sites_file), "--output", str(out)]) == 1
    assert not out.exists()


def test_zero_timeout_is_rejected(tmp_path, sites_file, fake_renderer):
    out = tmp_path / "urls.txt"
    code = cli.main(["local", "--sites-file", str(sites_file), "--output", str(out), "--timeout", "0"])
    assert code == 1
    assert not out.exists()
