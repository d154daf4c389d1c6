"""Client settings and token persistence.

Settings come from the environment (the CLI loads a ``.env`` first).
The auth token lives in a small file so that ``auditflow login`` survives
between invocations.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:4000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_TOKEN_FILE = Path.home() / ".auditflow" / "token"

API_URL_ENV = "AUDITFLOW_API_URL"
TOKEN_ENV = "AUDITFLOW_TOKEN"
TOKEN_FILE_ENV = "AUDITFLOW_TOKEN_FILE"
TIMEOUT_ENV = "AUDITFLOW_TIMEOUT"
MAX_RETRIES_ENV = "AUDITFLOW_MAX_RETRIES"

log = logging.getLogger(__name__)


class TokenStore:
    """File-backed bearer token storage.

    An explicit ``token`` (e.g. from AUDITFLOW_TOKEN) takes precedence over
    the file and is never written to disk.
    """

    def __init__(self, path: Path | str = DEFAULT_TOKEN_FILE, token: str | None = None):
        self.path = Path(path).expanduser()
        self._explicit = token or None

    def load(self) -> str | None:
        if self._explicit:
            return self._explicit
        try:
            token = self.path.read_text().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            log.warning("Cannot read token file %s: %s", self.path, e)
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token + "\n")
        try:
            self.path.chmod(0o600)
        except OSError:
            log.debug("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        self._explicit = None
        self.path.unlink(missing_ok=True)


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    token: str | None = None
    token_file: Path = DEFAULT_TOKEN_FILE
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 0

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from AUDITFLOW_* environment variables."""
        timeout_raw = os.environ.get(TIMEOUT_ENV, "")
        retries_raw = os.environ.get(MAX_RETRIES_ENV, "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"{TIMEOUT_ENV} must be a number, got {timeout_raw!r}")
        try:
            max_retries = int(retries_raw) if retries_raw else 0
        except ValueError:
            raise ValueError(f"{MAX_RETRIES_ENV} must be an integer, got {retries_raw!r}")
        return cls(
            api_url=os.environ.get(API_URL_ENV) or DEFAULT_API_URL,
            token=os.environ.get(TOKEN_ENV) or None,
            token_file=Path(
                os.environ.get(TOKEN_FILE_ENV) or DEFAULT_TOKEN_FILE
            ).expanduser(),
            timeout=timeout,
            max_retries=max(0, max_retries),
        )

    def token_store(self) -> TokenStore:
        return TokenStore(self.token_file, token=self.token)
