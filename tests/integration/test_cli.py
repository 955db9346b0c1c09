from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from scrappey_actor import cli
from scrappey_actor.errors import AuthError

runner = CliRunner()


class FakeScrappey:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def __call__(self, api_key, body, **kwargs):
        self.calls.append({"api_key": api_key, "body": body, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def fake_scrappey(monkeypatch, scrappey_fixture):
    """Replace the HTTP call with a canned envelope (or error) and record calls."""
    fake = FakeScrappey(scrappey_fixture("success_full.json"))
    monkeypatch.setattr("scrappey_actor.actor.scrappey_request", fake)
    return fake


def _write_input(tmp_path, data):
    path = tmp_path / "INPUT.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_run_appends_record_to_dataset(tmp_path, fake_scrappey):
    input_path = _write_input(tmp_path, {"scrappeyApiKey": "k", "url": "https://example.com", "cmd": "GET"})
    dataset = tmp_path / "out" / "items.jsonl"

    result = runner.invoke(cli.app, ["run", "--input", input_path, "--dataset", str(dataset)])

    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in dataset.read_text(encoding="utf-8").splitlines()]
    assert len(rows) == 1
    assert rows[0]["cmd"] == "request.get"
    assert rows[0]["statusCode"] == 200
    assert fake_scrappey.calls[0]["api_key"] == "k"
    assert fake_scrappey.calls[0]["timeout_ms"] == 300_000
    assert '"statusCode": 200' in result.output


def test_run_takes_key_from_environment(tmp_path, monkeypatch, fake_scrappey):
    monkeypatch.setenv("SCRAPPEY_API_KEY", "env-key")
    input_path = _write_input(tmp_path, {"url": "https://example.com"})

    result = runner.invoke(cli.app, ["run", "-i", input_path, "-d", str(tmp_path / "items.jsonl")])

    assert result.exit_code == 0, result.output
    assert fake_scrappey.calls[0]["api_key"] == "env-key"


def test_run_without_input_exits_non_zero(tmp_path, fake_scrappey):
    result = runner.invoke(cli.app, ["run", "-i", str(tmp_path / "missing.json"), "-d", str(tmp_path / "x.jsonl")])
    assert result.exit_code == 1
    assert "Input is missing!" in result.output
    assert fake_scrappey.calls == []
    assert not (tmp_path / "x.jsonl").exists()


def test_run_reports_auth_failure(tmp_path, fake_scrappey):
    fake_scrappey.response = AuthError(401)
    input_path = _write_input(tmp_path, {"scrappeyApiKey": "k", "url": "https://example.com"})

    result = runner.invoke(cli.app, ["run", "-i", input_path, "-d", str(tmp_path / "x.jsonl")])

    assert result.exit_code == 1
    assert "Invalid or expired Scrappey API key" in result.output


def test_run_reports_provider_error(tmp_path, fake_scrappey, scrappey_fixture):
    fake_scrappey.response = scrappey_fixture("error_cloudflare.json")
    input_path = _write_input(tmp_path, {"scrappeyApiKey": "k", "url": "https://example.com"})

    result = runner.invoke(cli.app, ["run", "-i", input_path, "-d", str(tmp_path / "x.jsonl")])

    assert result.exit_code == 1
    assert "CODE-0002" in result.output


def test_run_rejects_wrongly_typed_field(tmp_path, fake_scrappey):
    input_path = _write_input(tmp_path, {"scrappeyApiKey": "k", "url": "https://example.com", "customHeaders": 5})

    result = runner.invoke(cli.app, ["run", "-i", input_path, "-d", str(tmp_path / "x.jsonl")])

    assert result.exit_code == 1
    assert "Invalid value for customHeaders: expected an object, got int" in result.output
    assert fake_scrappey.calls == []


def test_build_body_prints_body_without_key(fixture_path):
    result = runner.invoke(cli.app, ["build-body", "--input", fixture_path("input_post.json")])

    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body == {
        "cmd": "request.post",
        "url": "https://httpbin.org/post",
        "postData": {"username": "demo", "page": 2},
        "requestType": "request",
        "customHeaders": {"X-Trace": "abc"},
        "proxyCountry": "UnitedStates",
        "premiumProxy": True,
        "timeout": 60000,
    }


def test_build_body_rejects_invalid_command(tmp_path):
    input_path = _write_input(tmp_path, {"scrappeyApiKey": "k", "url": "https://example.com", "cmd": "head"})
    result = runner.invoke(cli.app, ["build-body", "-i", input_path])
    assert result.exit_code == 1
    assert "Invalid command: head" in result.output


def test_commands_lists_short_forms():
    result = runner.invoke(cli.app, ["commands"])
    assert result.exit_code == 0
    assert "post     -> request.post" in result.output
    assert len(result.output.strip().splitlines()) == 5
