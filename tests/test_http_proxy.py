import json

import pytest

from conftest import FakeExecutor, failed, ok
from http_proxy import ShellHttpProxy, parse_framed_output
from models import ProxyRequest


class StaticTokens:
    def __init__(self, token: str) -> None:
        self.token = token
        self.calls = 0

    def read_token(self) -> str:
        self.calls += 1
        return self.token


@pytest.mark.parametrize(
    "out, success, expected",
    [
        ("abc\n__HTTP__404", True, ("abc", 404)),
        ('{"ok":true}\n__HTTP__200', True, ('{"ok":true}', 200)),
        ("plainbody", True, ("plainbody", 200)),
        ("plainbody", False, ("plainbody", 0)),
        ("a\n__HTTP__1\n__HTTP__503", True, ("a\n__HTTP__1", 503)),
        ("\n__HTTP__000", False, ("", 0)),
        ("x\n__HTTP__oops", True, ("x", 0)),
    ],
)
def test_parse_framed_output(out: str, success: bool, expected) -> None:
    assert parse_framed_output(out, success) == expected


def test_missing_token_sends_nothing() -> None:
    executor = FakeExecutor()
    proxy = ShellHttpProxy(executor, StaticTokens("  "))

    response = proxy.get("/api/status")

    assert response.to_dict() == {"code": 0, "body": "", "error": "token_missing"}
    assert executor.commands == []


def test_get_command_carries_both_auth_headers() -> None:
    executor = FakeExecutor(lambda cmd: ok('{"mode":"balanced"}', "__HTTP__200"))
    proxy = ShellHttpProxy(executor, StaticTokens("tok"))

    response = proxy.get("/api/status")

    assert response.code == 200
    assert response.body == '{"mode":"balanced"}'
    cmd = executor.commands[0]
    assert "-s -m 3" in cmd
    assert "-H 'X-Api-Key: tok'" in cmd
    assert "-H 'Authorization: Bearer tok'" in cmd
    assert "-o - -w '\\n__HTTP__%{http_code}'" in cmd
    assert "'http://127.0.0.1:1004/api/status'" in cmd
    assert " || /data/data/com.termux/files/usr/bin/curl " in cmd
    assert "--data-binary" not in cmd
    # The token never reaches the log label
    assert executor.labels == ["curl GET /api/status"]


def test_post_pipes_base64_body_into_curl() -> None:
    executor = FakeExecutor(lambda cmd: ok("", "__HTTP__204"))
    proxy = ShellHttpProxy(executor, StaticTokens("tok"))

    response = proxy.post("/api/profile", '{"mode":"x"}')

    assert response.code == 204
    cmd = executor.commands[0]
    assert cmd.startswith("echo 'eyJtb2RlIjoieCJ9' | (base64 -d 2>/dev/null || /system/bin/toybox base64 -d 2>/dev/null) | (")
    assert "-H 'Content-Type: application/json'" in cmd
    assert "-X 'POST' --data-binary @-" in cmd


def test_shell_error_only_on_failure() -> None:
    executor = FakeExecutor(lambda cmd: failed("curl: not found", "sh: termux: not found"))
    proxy = ShellHttpProxy(executor, StaticTokens("tok"))

    assert proxy.get("/api/status").to_dict() == {
        "code": 0,
        "body": "",
        "shell_error": "curl: not found\nsh: termux: not found",
    }


def test_single_candidate_has_no_alternation() -> None:
    proxy = ShellHttpProxy(FakeExecutor(), StaticTokens("t"), curl_candidates=["curl"], base64_decoders=["base64 -d"])

    assert "||" not in proxy.build_command(ProxyRequest("GET", "/x"), "t")
    assert "||" not in proxy.build_command(ProxyRequest("POST", "/x", "{}"), "t")


def test_post_body_reaches_client_through_real_shell(shell, tmp_path) -> None:
    # Stand-in client: echoes the request body and reports 201
    client = tmp_path / "curl"
    client.write_text("#!/bin/sh\ncat\nprintf '\\n__HTTP__201'\n")
    client.chmod(0o755)
    proxy = ShellHttpProxy(shell, StaticTokens("tok"), curl_candidates=[str(client)])
    body = json.dumps({"profile": "it's \"fast\"", "cpus": [0, 1]})

    response = proxy.post("/api/profile", body)

    assert response.code == 201
    assert response.body == body
    assert response.shell_error is None


def test_falls_back_to_second_client(shell, tmp_path) -> None:
    broken = tmp_path / "missing-curl"
    client = tmp_path / "curl"
    client.write_text("#!/bin/sh\nprintf 'pong\\n__HTTP__200'\n")
    client.chmod(0o755)
    proxy = ShellHttpProxy(shell, StaticTokens("tok"), curl_candidates=[str(broken), str(client)])

    response = proxy.get("/api/ping")

    assert (response.code, response.body) == (200, "pong")
