"""Host-name normalisation and helpers for routing commands to hosts."""

from __future__ import annotations

import shlex
import socket
from typing import Iterable, Union

_LOCAL_NAMES = {"localhost", "127.0.0.1", "::1"}


def _host_only(host: str) -> str:
    if host.startswith("["):
        end = host.find("]")
        if end != -1:
            return host[1:end]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def canonical_host(host: str) -> str:
    """Lower-case host name without root@ prefix, port or trailing dot."""
    host = host.strip()
    host = host.removeprefix("root@")
    if host in ("::1", "[::1]"):
        return "::1"
    host = _host_only(host)
    host = host.removesuffix(".")
    return host.lower()


def short_host(host: str) -> str:
    """The first label of the canonical host name."""
    return canonical_host(host).split(".", 1)[0]


def matches_local_host(host: str) -> bool:
    """Whether host names the machine this process runs on."""
    host = canonical_host(host)
    if not host:
        return False
    if host in _LOCAL_NAMES:
        return True
    try:
        local = socket.gethostname()
    except OSError:
        return False
    local = canonical_host(local)
    if not local:
        return False
    return host == local or short_host(host) == short_host(local)


def is_current_execution_host(host: str, effective: str) -> bool:
    """Whether commands for host already run where the effective target runs them."""
    host = canonical_host(host)
    if not host:
        return True
    effective_host = canonical_host(effective.removeprefix("root@"))
    if effective_host:
        return host == effective_host
    return matches_local_host(host)


def ensure_root_prefix(host: str) -> str:
    """Prefix host with root@ unless it already names a user."""
    host = host.strip()
    if "@" in host:
        return host
    return "root@" + host


def shell_join(args: Iterable[str]) -> str:
    """Quote arguments into one command line for a remote shell."""
    return shlex.join(list(args))


def is_tail_log_not_found_output(output: Union[bytes, str]) -> bool:
    """Whether tail output says the log file does not exist."""
    text = output.decode("utf-8", "replace") if isinstance(output, bytes) else output
    return "No such file or directory" in text and (
        "cannot open" in text or "No such file" in text
    )