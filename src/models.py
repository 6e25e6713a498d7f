# --- START OF FILE models.py ---

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one elevated shell invocation."""
    success: bool
    stdout: Tuple[str, ...] = ()
    stderr: Tuple[str, ...] = ()

    @property
    def output(self) -> str:
        return "\n".join(self.stdout)

    @property
    def error_output(self) -> str:
        return "\n".join(self.stderr)


@dataclass(frozen=True)
class ProxyRequest:
    method: str # 'GET' or 'POST'
    path: str
    body: str = "" # POST only

    @property
    def sends_body(self) -> bool:
        # Anything but GET carries a payload (the UI only issues GET and POST)
        return self.method.upper() != "GET"


@dataclass
class ProxyResponse:
    # 0 = no network attempt was made, or the client tool failed
    code: int
    body: str = ""
    error: Optional[str] = None # e.g. 'token_missing'
    shell_error: Optional[str] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        """JSON shape handed to the UI; absent optional keys are omitted."""
        result = {"code": self.code, "body": self.body}
        if self.error is not None:
            result["error"] = self.error
        if self.shell_error is not None:
            result["shell_error"] = self.shell_error
        return result

# --- END OF FILE models.py ---
