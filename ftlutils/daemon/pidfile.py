import logging
import re
from pathlib import Path

from ..utils.config import FTL_CONF_PATH, DEFAULT_PID_FILE

logger = logging.getLogger(__name__)

NO_PID = -1

_PID_RE = re.compile(r"[0-9]+")


def get_pid_file_path(
    ftl_conf: str | Path = FTL_CONF_PATH,
    default_pid_file: str | Path = DEFAULT_PID_FILE,
) -> Path:
    """Return the FTL PID file path.

    Uses the first ``PIDFILE=`` line of ftl_conf when present, otherwise
    default_pid_file.
    """
    conf_path = Path(ftl_conf)
    content = ""
    try:
        if conf_path.is_file():
            with open(conf_path, newline="") as f:
                content = f.read()
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to read {conf_path}: {e}")

    for line in content.split("\n"):
        if line.startswith("PIDFILE="):
            value = line.split("=", 1)[1]
            if value:
                return Path(value)
            logger.debug(f"Empty PIDFILE in {conf_path}, using default")
            break

    return Path(default_pid_file)


def is_valid_pid(text: str) -> bool:
    """Only plain ASCII digits; signs, spaces and other digit scripts are rejected."""
    return _PID_RE.fullmatch(text) is not None


def read_pid(pid_path: str | Path) -> int:
    """Read the PID stored in pid_path, or NO_PID if there is no valid one.

    Content that is not a plain decimal number is discarded so that it can
    never reach a process-signalling call.
    """
    pid_path = Path(pid_path)
    try:
        content = pid_path.read_text()
    except FileNotFoundError:
        return NO_PID
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to read PID file {pid_path}: {e}")
        return NO_PID

    content = content.rstrip("\n")
    if not content:
        return NO_PID

    if not is_valid_pid(content):
        logger.warning(f"Ignoring invalid content in PID file {pid_path}")
        return NO_PID

    return int(content)
