"""CLI tests: argument parsing, default command injection and the chat and
models actions driven through a fake transport."""
from __future__ import annotations

import io
import json

import pytest

from vault_chat.service.cli import _with_default_command, main
from vault_chat.service.cli.cli_actions import handle_chat, handle_models, read_prompt
from vault_chat.service.cli.cli_parser import build_parser

NDJSON_BODY = [b'{"message":{"content":"Hel"}}\n{"message":{"content":"lo"}}\n', b'{"done":true}\n']


@pytest.mark.parametrize(
    "argv,expected",
    [
        (["hi"], ["chat", "hi"]),
        ([], ["chat"]),
        (["models"], ["models"]),
        (["--help"], ["--help"]),
        (["--log-level", "DEBUG", "models"], ["--log-level", "DEBUG", "models"]),
        (["--log-level", "DEBUG", "hi"], ["--log-level", "DEBUG", "chat", "hi"]),
        (["--log-level=INFO", "--provider", "ollama"], ["--log-level=INFO", "chat", "--provider", "ollama"]),
    ],
)
def test_default_command_injection(argv, expected):
    assert _with_default_command(argv) == expected  # nosec B101


def test_parser_rejects_non_positive_timeout(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["chat", "hi", "--timeout", "0"])
    assert "must be greater than zero" in capsys.readouterr().err  # nosec B101


def test_read_prompt_falls_back_to_stdin():
    args = build_parser().parse_args(["chat"])
    assert read_prompt(args, io.StringIO("  from stdin \n")) == "from stdin"  # nosec B101


def test_chat_streams_plain_text(fake_transport_cls, inline):
    transport = fake_transport_cls(chunks=NDJSON_BODY)
    args = build_parser().parse_args(["chat", "Hi", "--provider", "ollama", "--system", "be brief", "--timeout", "5"])
    out, err = io.StringIO(), io.StringIO()
    code = handle_chat(args, transport=transport, spawn=inline, stdout=out, stderr=err)
    assert code == 0  # nosec B101
    assert out.getvalue() == "Hello\n"  # nosec B101
    assert err.getvalue() == ""  # nosec B101
    assert transport.last.timeout_seconds == 5.0  # nosec B101
    assert transport.last.request.body["messages"] == [  # nosec B101
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "Hi"},
    ]


def test_chat_json_lines(fake_transport_cls, inline):
    transport = fake_transport_cls(chunks=NDJSON_BODY)
    args = build_parser().parse_args(["chat", "Hi", "--provider", "ollama", "--json"])
    out = io.StringIO()
    assert handle_chat(args, transport=transport, spawn=inline, stdout=out, stderr=io.StringIO()) == 0  # nosec B101
    lines = [json.loads(line) for line in out.getvalue().splitlines()]
    assert lines == [  # nosec B101
        {"type": "token", "token": "Hel", "error": None},
        {"type": "token", "token": "lo", "error": None},
        {"type": "done", "token": None, "error": None},
    ]


def test_chat_http_error_exit_code(fake_transport_cls, inline):
    transport = fake_transport_cls(status=404)
    args = build_parser().parse_args(["chat", "Hi", "--provider", "ollama", "--model", "phi3"])
    err = io.StringIO()
    assert handle_chat(args, transport=transport, spawn=inline, stdout=io.StringIO(), stderr=err) == 1  # nosec B101
    assert err.getvalue().startswith('error: Model "phi3" not found')  # nosec B101


def test_chat_empty_prompt_is_usage_error(fake_transport_cls):
    args = build_parser().parse_args(["chat"])
    err = io.StringIO()
    code = handle_chat(args, transport=fake_transport_cls(), stdin=io.StringIO(""), stderr=err)
    assert code == 2  # nosec B101
    assert "prompt is required" in err.getvalue()  # nosec B101


def test_chat_interrupt_returns_130(fake_transport_cls, inline):
    class InterruptingOut(io.StringIO):
        def write(self, s):
            raise KeyboardInterrupt

    args = build_parser().parse_args(["chat", "Hi", "--provider", "ollama"])
    err = io.StringIO()
    code = handle_chat(
        args,
        transport=fake_transport_cls(chunks=NDJSON_BODY),
        spawn=inline,
        stdout=InterruptingOut(),
        stderr=err,
    )
    assert code == 130  # nosec B101
    assert "interrupted" in err.getvalue()  # nosec B101


def test_main_without_key_reports_config_error(capsys):
    assert main(["Hello"]) == 1  # nosec B101
    assert "OPENAI_API_KEY is not set in environment variables" in capsys.readouterr().err  # nosec B101


def test_models_plain_and_json(capsys):
    args = build_parser().parse_args(["models", "--provider", "openai"])
    out = io.StringIO()
    assert handle_models(args, stdout=out) == 0  # nosec B101
    assert out.getvalue().splitlines()[0] == "gpt-5-mini\tGPT-5 Mini\tFast and efficient (default)"  # nosec B101

    assert main(["models", "--json"]) == 0  # nosec B101
    ids = [m["id"] for m in json.loads(capsys.readouterr().out)]
    assert ids == ["gpt-5-mini", "gpt-5", "gpt-4.1", "gpt-4o"]  # nosec B101


def test_models_for_provider_without_catalog():
    args = build_parser().parse_args(["models", "--provider", "ollama", "--json"])
    out = io.StringIO()
    assert handle_models(args, stdout=out) == 0  # nosec B101
    assert json.loads(out.getvalue()) == []  # nosec B101
