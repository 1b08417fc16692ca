"""Read and write pihole-FTL settings through its ``--config`` command line.

The binary owns all parsing and validation of keys and values; nothing here
second-guesses it.
"""

import logging
import subprocess
from typing import Protocol

from ..utils.config import DEFAULT_FTL_COMMAND, get_ftl_command, load_config

logger = logging.getLogger(__name__)


class FTLNotFound(Exception):
    command: list[str]
    reason: str

    def __init__(self, command: list[str], reason: str = "not found"):
        self.command = command
        self.reason = reason
        super().__init__(f"FTL binary {reason}: {command[0]}")


class FTLConfigError(Exception):
    key: str
    returncode: int
    stderr: str

    def __init__(self, key: str, returncode: int, stderr: str = ""):
        self.key = key
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Failed to read {key} (exit code {returncode})"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)


class ConfigBackend(Protocol):
    def get(self, key: str) -> str: ...

    def set(self, key: str, value: str) -> bool: ...


class FTLCommandBackend:
    def __init__(self, command: list[str] | None = None):
        self.command = list(command or DEFAULT_FTL_COMMAND)

    def _run(self, args: list[str], capture_stdout: bool) -> subprocess.CompletedProcess:
        argv = [*self.command, "--config", *args]
        logger.debug(f"Running {argv}")
        try:
            return subprocess.run(
                argv,
                stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise FTLNotFound(self.command) from e
        except PermissionError as e:
            raise FTLNotFound(self.command, "not executable") from e

    def get(self, key: str) -> str:
        result = self._run(["-q", key], capture_stdout=True)
        if result.returncode != 0:
            raise FTLConfigError(key, result.returncode, result.stderr)
        return result.stdout.rstrip("\n")

    def set(self, key: str, value: str) -> bool:
        result = self._run([key, value], capture_stdout=False)
        if result.returncode != 0:
            logger.warning(
                f"Setting {key} failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
            return False
        return True


def default_backend() -> FTLCommandBackend:
    return FTLCommandBackend(get_ftl_command(load_config()))


def get_ftl_config_value(key: str, backend: ConfigBackend | None = None) -> str:
    """Return the current value of key, e.g. ``get_ftl_config_value("dns.piholePTR")``."""
    backend = backend or default_backend()
    return backend.get(key)


def set_ftl_config_value(key: str, value: str, backend: ConfigBackend | None = None) -> bool:
    """Set key to value and return whether FTL accepted it.

    Complex values are passed as one argument, exactly as written:

        set_ftl_config_value("dns.upstreams", '[ "8.8.8.8" , "8.8.4.4" ]')
    """
    backend = backend or default_backend()
    return backend.set(key, value)
