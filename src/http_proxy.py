"""
HTTP-over-Shell Proxy (root-side fallback transport)

Relays GET/POST requests to the mora daemon by running curl inside the
elevated shell. Used where the UI's own network stack cannot reach the
daemon's loopback port.

Wire format on the command's stdout:

    <response body>\n__HTTP__<status code>

Client binaries and base64 decoders are tried in order within one shell
invocation (`a || b`), the first one that runs successfully wins.
"""

from typing import List, Optional, Tuple

import constants
from debug_logging import log_debug, log_warning
from models import ProxyRequest, ProxyResponse
from privileged_shell import PrivilegedExecutor
from token_manager import TokenManager
from utils import sh_quote, b64encode_text


def parse_framed_output(out: str, shell_success: bool) -> Tuple[str, int]:
    """
    Split curl output into (body, status code).

    Uses the last status marker so a body that happens to contain the marker
    text is kept intact. Without a marker the whole output is the body and the
    status is inferred from the shell result (200 on success, else 0).
    """
    marker = constants.HTTP_STATUS_MARKER
    idx = out.rfind(marker)
    if idx >= 0:
        body = out[:idx]
        try:
            code = int(out[idx + len(marker):].strip())
        except ValueError:
            code = 0
        return body, code
    return out, 200 if shell_success else 0


def _first_success(templates: List[str]) -> str:
    """Chain alternatives so the shell stops at the first one that exits 0."""
    if len(templates) == 1:
        return templates[0]
    return "(" + " || ".join(templates) + ")"


class ShellHttpProxy:

    def __init__(self, executor: PrivilegedExecutor, token_manager: TokenManager,
                 base_url: str = constants.API_BASE_URL,
                 curl_candidates: Optional[List[str]] = None,
                 base64_decoders: Optional[List[str]] = None,
                 timeout_seconds: int = constants.HTTP_TIMEOUT_SECONDS):
        self._executor = executor
        self._token_manager = token_manager
        self.base_url = base_url
        self._curl_candidates = list(curl_candidates or constants.CURL_CANDIDATES)
        self._base64_decoders = list(base64_decoders or constants.BASE64_DECODERS)
        self._timeout_seconds = timeout_seconds

    def get(self, path: str) -> ProxyResponse:
        return self.request("GET", path)

    def post(self, path: str, body: str) -> ProxyResponse:
        return self.request("POST", path, body)

    def request(self, method: str, path: str, body: str = "") -> ProxyResponse:
        """
        Perform one request against the daemon through the elevated shell.

        Never raises: a missing token short-circuits with
        code 0 / error 'token_missing' before any shell command is issued,
        and tool or network failures surface as code 0.
        """
        token = self._token_manager.read_token()
        if not token.strip():
            log_warning("PROXY", f"{method.upper()} {path}: api_token unavailable, request not sent")
            return ProxyResponse(code=0, body="", error=constants.PROXY_ERROR_TOKEN_MISSING)

        req = ProxyRequest(method=method.upper(), path=path, body=body)
        cmd = self.build_command(req, token)
        result = self._executor.run(cmd, label=f"curl {req.method} {req.path}")

        body_text, code = parse_framed_output(result.output, result.success)
        log_debug("PROXY", f"{req.method} {req.path} -> {code} ({len(body_text)} bytes)")

        shell_error = None
        if not result.success and result.stderr:
            shell_error = result.error_output
        return ProxyResponse(code=code, body=body_text, shell_error=shell_error)

    def build_command(self, req: ProxyRequest, token: str) -> str:
        """Shell command for `req`; the token is quoted into two auth headers."""
        url = sh_quote(self.base_url + req.path)
        headers = [
            sh_quote(f"{constants.API_KEY_HEADER}: {token}"),
            sh_quote(f"{constants.AUTHORIZATION_HEADER}: Bearer {token}"),
        ]
        framing = "-o - -w " + sh_quote(constants.HTTP_STATUS_MARKER.replace("\n", "\\n") + "%{http_code}")

        if not req.sends_body:
            args = " ".join(f"-H {h}" for h in headers)
            clients = [f"{curl} -s -m {self._timeout_seconds} {args} {framing} {url}"
                       for curl in self._curl_candidates]
            return _first_success(clients)

        headers.append(sh_quote(f"Content-Type: {constants.JSON_CONTENT_TYPE}"))
        args = " ".join(f"-H {h}" for h in headers)
        decoders = [f"{decoder} 2>/dev/null" for decoder in self._base64_decoders]
        clients = [f"{curl} -s -m {self._timeout_seconds} {args} -X {sh_quote(req.method)} --data-binary @- {framing} {url}"
                   for curl in self._curl_candidates]
        payload = sh_quote(b64encode_text(req.body))
        return f"echo {payload} | {_first_success(decoders)} | {_first_success(clients)}"
