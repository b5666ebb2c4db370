"""Cleaning command and log output for display in a terminal."""

from __future__ import annotations

import re
from typing import Iterable, List, Union

_ANSI_SEQUENCE = re.compile(
    r"""
    \x1b\][^\x07\x1b]*(?:\x07|\x1b\\)?     # OSC, ended by BEL or ST
    | \x1b[P^_X][^\x1b]*(?:\x1b\\)?        # DCS, PM, APC, SOS strings
    | \x1b\[[0-?]*[ -/]*[@-~]              # CSI
    | \x9b[0-?]*[ -/]*[@-~]                # 8-bit CSI
    | \x1b[ -/]*[0-~]                      # other escape sequences
    """,
    re.VERBOSE,
)

_SSH_TRANSPORT_WARNINGS = (
    "post-quantum key exchange",
    "store now, decrypt later",
    "openssh.com/pq.html",
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return _ANSI_SEQUENCE.sub("", text)


def _drop_control_chars(line: str) -> str:
    return "".join(ch for ch in line if ch == "\t" or ch >= " ")


def sanitize_log_lines(lines: Iterable[str]) -> List[str]:
    """Strip escape sequences, trailing carriage returns and control characters (tabs stay)."""
    return [_drop_control_chars(strip_ansi(line).rstrip("\r")) for line in lines]


def split_log_output(raw: Union[bytes, str]) -> List[str]:
    """Split command output into sanitized lines, ignoring trailing newlines."""
    text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
    return sanitize_log_lines(text.rstrip("\n").split("\n"))


def is_ssh_transport_warning_line(line: str) -> bool:
    """Whether line is one of OpenSSH's post-quantum key exchange warnings."""
    return any(marker in line for marker in _SSH_TRANSPORT_WARNINGS)


def clean_qdb_coup_output(raw: str) -> str:
    """Output of a QuarkDB coup attempt without blank lines or SSH transport warnings."""
    lines = sanitize_log_lines(raw.strip().split("\n"))
    kept = []
    for line in lines:
        trimmed = line.lstrip("| ").strip()
        if not trimmed or is_ssh_transport_warning_line(trimmed):
            continue
        kept.append(line)
    return "\n".join(kept).strip()


def missing_log_file_message(file_path: str, host: str = "") -> str:
    """Message shown in place of a log file that does not exist."""
    if not host:
        return f"{file_path} is not present on this host."
    return f"{file_path} is not present on {host}."