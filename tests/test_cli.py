from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from tests.utils import unreachable
from tikentoken import cli
from tikentoken.config import RetryPolicy
from tikentoken.gateway import Gateway
from tikentoken.transport import Transport

runner = CliRunner()


@pytest.fixture
def service(monkeypatch, tmp_path):
    """Route the CLI's gateway to a mock service; returns a setter and the request log."""
    monkeypatch.chdir(tmp_path)
    for name in ("OLLAMA_URL", "TIKENTOKEN_RETRIES", "TIKENTOKEN_CHAT_MODEL", "TIKENTOKEN_EMBED_MODEL"):
        monkeypatch.delenv(name, raising=False)
    state: dict = {"handler": unreachable, "requests": [], "base_urls": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def fake_gateway(*, config):
        state["base_urls"].append(config.base_url)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = Transport(config.base_url, retry=RetryPolicy(attempts=1, backoff_s=0.0), client=client)
        return Gateway(config=config, transport=transport)

    monkeypatch.setattr(cli, "Gateway", fake_gateway)
    return state


def _payload(request: httpx.Request) -> dict:
    return json.loads(request.content)


def test_tokenize_prints_service_tokens(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"tokens": [105, 1919]})
    result = runner.invoke(cli.app, ["--model", "bge-large", "Hello", "world"])

    assert result.exit_code == 0
    assert "Tokens: 105 1919" in result.output
    assert _payload(service["requests"][0]) == {"model": "bge-large", "prompt": "Hello world"}


def test_tokenize_falls_back_when_service_down(service) -> None:
    result = runner.invoke(cli.app, ["Hello, world!"])

    assert result.exit_code == 0
    assert "Tokens: 5 1 5 1" in result.output


def test_reads_stdin_when_no_arguments(service) -> None:
    result = runner.invoke(cli.app, [], input="  Hello world\n")

    assert result.exit_code == 0
    assert "Tokens: 5 5" in result.output


def test_empty_input_exits_with_error(service) -> None:
    result = runner.invoke(cli.app, [], input="   \n")

    assert result.exit_code == 1
    assert "No input provided." in result.output
    assert service["requests"] == []


def test_extra_options_reach_tokenize_payload(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"tokens": [2, 9]})
    result = runner.invoke(cli.app, ["--extra_options", "add_bos:true,num_ctx:2048", "Hi"])

    assert result.exit_code == 0
    assert _payload(service["requests"][0]) == {
        "model": "embeddinggemma",
        "prompt": "Hi",
        "add_bos": True,
        "num_ctx": "2048",
    }


def test_malformed_extra_options_exit_with_error(service) -> None:
    result = runner.invoke(cli.app, ["--extra_options", "add_bos", "Hi"])

    assert result.exit_code == 1
    assert "expected key:value" in result.output


def test_piece_format_is_rejected(service) -> None:
    result = runner.invoke(cli.app, ["--format", "piece", "Hi"])

    assert result.exit_code == 1
    assert "Tokenization error: Piece format not supported" in result.output


def test_embed_prints_psql_vector(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"embedding": [0.5, -0.25]})
    result = runner.invoke(cli.app, ["--embed", "--embed_dim", "2", "Hello"])

    assert result.exit_code == 0
    assert "Embedding (psql vector): [0.5,-0.25]" in result.output
    assert _payload(service["requests"][0])["options"] == {"output_dimension": 2}


def test_embed_dimension_mismatch_fails(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"embedding": [0.1] * 512})
    result = runner.invoke(cli.app, ["--embed", "Hello"])

    assert result.exit_code == 1
    assert "Embedding error: Unexpected dim: 512 (expected 768)" in result.output


def test_chat_prints_response_with_chat_default_model(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"response": "Code flows like a stream"})
    result = runner.invoke(cli.app, ["--chat", "Write a haiku"])

    assert result.exit_code == 0
    assert "Code flows like a stream" in result.output
    assert _payload(service["requests"][0])["model"] == "tinyllama"


def test_chat_takes_precedence_over_embed(service) -> None:
    service["handler"] = lambda request: httpx.Response(200, json={"response": "hi"})
    result = runner.invoke(cli.app, ["--chat", "--embed", "Hello"])

    assert result.exit_code == 0
    assert service["requests"][0].url.path == "/api/generate"


def test_chat_error_is_reported(service) -> None:
    service["handler"] = lambda request: httpx.Response(404, json={"error": "model not found"})
    result = runner.invoke(cli.app, ["--chat", "Hello"])

    assert result.exit_code == 1
    assert "Chat error: model not found" in result.output


def test_ollama_url_flag_overrides_environment(service, monkeypatch) -> None:
    monkeypatch.setenv("OLLAMA_URL", "http://from-env:11434")
    runner.invoke(cli.app, ["--ollama_url", "http://flag:9999", "Hi"])
    runner.invoke(cli.app, ["Hi"])

    assert service["base_urls"] == ["http://flag:9999", "http://from-env:11434"]


def test_invalid_utf8_stdin_exits_with_error(service) -> None:
    result = runner.invoke(cli.app, [], input=b"\xff\xfeHi")

    assert result.exit_code == 1
    assert "Error: Input is not valid UTF-8 text." in result.output
    assert service["requests"] == []
