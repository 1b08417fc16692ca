"""Edit line-oriented ``key=value`` files such as ``setupVars.conf``.

Keys are matched literally against the start of each line. There is no
locking and no atomic replacement: callers serialize concurrent writers.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)


def _check_key(key: str) -> None:
    if not key:
        raise ValueError("Key cannot be empty")
    if "=" in key or "\n" in key or "\r" in key:
        raise ValueError(f"Invalid key {key!r}: must not contain '=' or newlines")


def _check_value(value: str) -> None:
    if "\n" in value or "\r" in value:
        raise ValueError(f"Invalid value {value!r}: must not contain newlines")


def _read_lines(path: Path) -> list[str]:
    # Only "\n" ends a line; "\r" and other separators stay part of the line.
    with open(path, newline="") as f:
        content = f.read()
    return [line for line in re.split(r"(?<=\n)", content) if line]


def _write_lines(path: Path, lines: list[str]) -> None:
    with open(path, "w", newline="") as f:
        f.write("".join(lines))


def _append_line(path: Path, line: str) -> None:
    lines = _read_lines(path)
    with open(path, "a", newline="") as f:
        if lines and not lines[-1].endswith("\n"):
            f.write("\n")
        f.write(line + "\n")


def add_or_edit_key_value(file: str | Path, key: str, value: str) -> None:
    """Set ``key=value`` in file, replacing existing ``key=`` lines or appending.

    Example:
        add_or_edit_key_value("/etc/pihole/setupVars.conf", "BLOCKING_ENABLED", "true")
    """
    _check_key(key)
    _check_value(value)
    path = Path(file)
    path.touch(exist_ok=True)

    prefix = f"{key}="
    new_line = f"{key}={value}\n"
    lines = _read_lines(path)
    replaced = 0
    for i, line in enumerate(lines):
        if line.startswith(prefix):
            lines[i] = new_line
            replaced += 1

    if replaced:
        _write_lines(path, lines)
        logger.debug(f"Replaced {replaced} line(s) for {key} in {path}")
    else:
        _append_line(path, f"{key}={value}")
        logger.debug(f"Appended {key} to {path}")


def add_key(file: str | Path, key: str) -> bool:
    """Append key as a bare line unless some line already starts with it.

    Returns True if the key was added. An existing line is left alone even if
    it carries a value, e.g. ``log-queries=extra``.

    Example:
        add_key("/etc/dnsmasq.d/01-pihole.conf", "log-queries")
    """
    _check_key(key)
    path = Path(file)
    path.touch(exist_ok=True)

    if any(line.startswith(key) for line in _read_lines(path)):
        logger.debug(f"{key} already present in {path}")
        return False

    _append_line(path, key)
    logger.debug(f"Added {key} to {path}")
    return True


def _matches(line: str, key: str, exact: bool) -> bool:
    if not exact:
        return line.startswith(key)
    stripped = line.rstrip("\r\n")
    return stripped == key or stripped.startswith(f"{key}=")


def remove_key(file: str | Path, key: str, exact: bool = False) -> int:
    """Delete every line starting with key and return how many were removed.

    By default this is a prefix match, so ``PIHOLE_DNS_1`` also removes
    ``PIHOLE_DNS_10=...``. Pass ``exact=True`` to only remove the bare key and
    ``key=...`` lines. A missing file is left missing.

    Example:
        remove_key("/etc/pihole/setupVars.conf", "PIHOLE_DNS_1")
    """
    _check_key(key)
    path = Path(file)
    if not path.exists():
        logger.debug(f"{path} does not exist, nothing to remove")
        return 0

    lines = _read_lines(path)
    kept = [line for line in lines if not _matches(line, key, exact)]
    removed = len(lines) - len(kept)
    if removed:
        _write_lines(path, kept)
        logger.debug(f"Removed {removed} line(s) for {key} from {path}")
    return removed
