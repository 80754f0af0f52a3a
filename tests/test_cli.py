"""Tests for the command line interface."""

import json

import pytest
from conftest import FakeResponse, FakeSession, make_token

import plasmid_browser.retrieval.loader as loader_mod
from plasmid_browser.cli import main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "plasmid_browser.config.yaml"
    path.write_text("data_url: https://script.example.com/exec\npage_size: 2\n")
    return path


@pytest.fixture
def fake_http(monkeypatch):
    """Install a FakeSession for every loader created by the CLI."""

    def _install(*responses):
        session = FakeSession(*responses)
        monkeypatch.setattr(loader_mod.requests, "Session", lambda: session)
        return session

    return _install


def test_search_prints_table_and_pager(config_file, fake_http, payload, capsys):
    session = fake_http(FakeResponse(200, payload))
    code = main(["--config", str(config_file), "search", "kan", "--token", "tok"])
    out = capsys.readouterr().out

    assert code == 0
    assert session.calls[0]["url"] == "https://script.example.com/exec?idToken=tok"
    assert "2 results" in out
    assert "pKan1" in out and "pNRC4" in out
    assert "Page 1 / 1 · Showing 1–2" in out


def test_search_json_with_filters(config_file, fake_http, payload, capsys):
    fake_http(FakeResponse(200, payload))
    code = main(
        [
            "--config", str(config_file),
            "search", "--token", "tok", "--member", "alice",
            "--sort", "Plasmid_Name:desc", "--format", "json",
        ]
    )
    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [r["Plasmid_Name"] for r in data["rows"]] == ["pNRC4", "pAmp7"]
    assert data["worksheet_options"] == ["all", "Empty", "S1", "S3"]


def test_search_no_matches(config_file, fake_http, payload, capsys):
    fake_http(FakeResponse(200, payload))
    main(["--config", str(config_file), "search", "nothing", "--token", "tok"])
    assert "No matches. Try a different keyword or filter." in capsys.readouterr().out


def test_members_and_worksheets(config_file, fake_http, payload, capsys):
    fake_http(FakeResponse(200, payload), FakeResponse(200, payload))
    main(["--config", str(config_file), "members", "--token", "tok"])
    out = capsys.readouterr().out
    assert out.index("alice") < out.index("bob")

    main(["--config", str(config_file), "worksheets", "--token", "tok", "--member", "bob"])
    assert capsys.readouterr().out.split() == ["all", "S2"]


def test_missing_token_prints_sign_in_hint(config_file, fake_http, monkeypatch, capsys):
    monkeypatch.delenv("PLASMID_BROWSER_TOKEN", raising=False)
    session = fake_http()
    code = main(["--config", str(config_file), "search", "kan"])
    assert code == 1
    assert "Sign in first" in capsys.readouterr().err
    assert session.calls == []


def test_token_from_environment(config_file, fake_http, payload, monkeypatch):
    monkeypatch.setenv("PLASMID_BROWSER_TOKEN", "env-tok")
    session = fake_http(FakeResponse(200, payload))
    assert main(["--config", str(config_file), "members"]) == 0
    assert session.calls[0]["url"].endswith("idToken=env-tok")


def test_load_error_exits_nonzero(config_file, fake_http, capsys):
    fake_http(FakeResponse(401))
    code = main(["--config", str(config_file), "search", "--token", "tok"])
    assert code == 1
    assert "Error: HTTP 401" in capsys.readouterr().err


def test_missing_data_url_is_config_error(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("PLASMID_BROWSER_DATA_URL", raising=False)
    path = tmp_path / "empty.yaml"
    path.write_text("page_size: 10\n")
    code = main(["--config", str(path), "search", "--token", "tok"])
    assert code == 2
    assert "Config error" in capsys.readouterr().err


def test_whoami(capsys):
    assert main(["whoami", "--token", make_token({"email": "alice@example.org"})]) == 0
    assert capsys.readouterr().out.strip() == "Signed in: alice@example.org"
