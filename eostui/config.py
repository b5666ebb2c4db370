"""Command-line options and environment defaults."""

from __future__ import annotations

import argparse
import os
import re
import sys
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .types import DEFAULT_TIMEOUT

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


@dataclass
class Options:
    show_version: bool = False
    ssh_target: str = ""
    timeout: float = DEFAULT_TIMEOUT
    no_alt_screen: bool = False
    accept_new_host_keys: bool = False


def parse_duration(value: str) -> float:
    """Parse a duration such as '15s', '1m30s' or '300ms' into seconds."""
    text = value
    sign = 1.0
    if text and text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")
    total = 0.0
    pos = 0
    while pos < len(text):
        match = _PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        total += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    return sign * total


def env_or_default(keys: Iterable[str], fallback: str) -> str:
    """The first non-empty value among the environment variables, else fallback."""
    for key in keys:
        value = os.environ.get(key, "")
        if value:
            return value
    return fallback


def env_duration_or_default(key: str, fallback: float) -> float:
    value = os.environ.get(key, "")
    if not value:
        return fallback
    try:
        return parse_duration(value)
    except ValueError:
        return fallback


def env_bool_or_default(key: str, fallback: bool) -> bool:
    value = os.environ.get(key, "").lower().strip()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return fallback


def terminal_supports_alt_screen() -> bool:
    term = os.environ.get("TERM", "").lower().strip()
    return term not in ("", "dumb")


def _duration_arg(value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_options(argv: Optional[Sequence[str]] = None) -> Options:
    """Parse command-line arguments, with defaults taken from the environment."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "version":
        return Options(show_version=True)

    parser = argparse.ArgumentParser(prog="eos-tui")
    parser.add_argument("--version", "-version", dest="show_version", action="store_true",
                        help="print version and exit")
    parser.add_argument("--ssh", "-ssh", dest="ssh_target",
                        default=env_or_default(["EOS_TUI_SSH", "EOS_TUI_SSH_TARGET"], ""),
                        help="SSH target for running EOS CLI remotely")
    parser.add_argument("--timeout", "-timeout", type=_duration_arg,
                        default=env_duration_or_default("EOS_TUI_TIMEOUT", DEFAULT_TIMEOUT),
                        help="per-request timeout")
    parser.add_argument("--no-alt-screen", "-no-alt-screen", dest="no_alt_screen", action="store_true",
                        default=env_bool_or_default("EOS_TUI_NO_ALT_SCREEN", False),
                        help="disable alternate screen mode")
    parser.add_argument("--ssh-accept-new-host-keys", "-ssh-accept-new-host-keys",
                        dest="accept_new_host_keys", action="store_true",
                        default=env_bool_or_default("EOS_TUI_SSH_ACCEPT_NEW_HOST_KEYS", False),
                        help="auto-accept first-seen SSH host keys using StrictHostKeyChecking=accept-new")
    namespace = parser.parse_args(args)
    return Options(**vars(namespace))