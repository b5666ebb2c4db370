"""Running EOS CLI commands locally or over SSH."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence, Tuple

from .hosts import ensure_root_prefix, is_current_execution_host, is_tail_log_not_found_output, shell_join
from .types import Config

log = logging.getLogger(__name__)


class CommandError(Exception):
    """A command failed; ``output`` holds its combined stdout and stderr."""

    def __init__(self, message: str, output: bytes = b"", timed_out: bool = False):
        super().__init__(message)
        self.output = output
        self.timed_out = timed_out


class LogFileNotFoundError(CommandError):
    """An optional log file is absent on the host."""


def _snippet(output: bytes) -> str:
    return output.decode("utf-8", "replace")[:300]


class SubprocessRunner:
    """Runs a program and returns its combined output."""

    def combined_output(self, name: str, args: Sequence[str], timeout: Optional[float]) -> bytes:
        limit = timeout if timeout and timeout > 0 else None
        try:
            completed = subprocess.run(
                [name, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=limit,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(
                f"context deadline exceeded: {name} timed out after {limit}s",
                output=exc.output or b"",
                timed_out=True,
            ) from exc
        except OSError as exc:
            raise CommandError(f"exec {name}: {exc}") from exc
        if completed.returncode != 0:
            raise CommandError(f"exit status {completed.returncode}", output=completed.stdout)
        return completed.stdout


class Client:
    """Executes EOS commands, locally or through an SSH target."""

    def __init__(self, config: Optional[Config] = None, runner=None):
        config = config or Config()
        self.ssh_target = config.ssh_target
        self.resolved_ssh_target = ""
        self.timeout = config.timeout
        self.accept_new_host_keys = config.accept_new_host_keys
        self.runner = runner if runner is not None else SubprocessRunner()

    def effective_ssh_target(self) -> str:
        """The discovered MGM master if known, else the configured target."""
        return self.resolved_ssh_target or self.ssh_target

    def set_resolved_target(self, target: str) -> None:
        self.resolved_ssh_target = target

    def ssh_args(self, batch_mode: bool, *args: str) -> List[str]:
        """SSH options followed by the given extra arguments."""
        options = ["-o", "LogLevel=ERROR", "-o", "BatchMode=yes" if batch_mode else "BatchMode=no"]
        if self.accept_new_host_keys:
            options += ["-o", "StrictHostKeyChecking=accept-new"]
        return options + list(args)

    def _execute(self, name: str, args: List[str], logged: Sequence[str]) -> bytes:
        try:
            return self.runner.combined_output(name, args, self.timeout)
        except CommandError as exc:
            log.debug("command %s failed: %s (output: %s)", shell_join(logged), exc, _snippet(exc.output))
            raise

    def run_command(self, *args: str) -> bytes:
        """Run a command on the effective target and return its output."""
        if not args:
            raise ValueError("no command given")
        log.debug("run: %s", shell_join(args))
        target = self.effective_ssh_target()
        if not target:
            return self._execute(args[0], list(args[1:]), args)
        return self._execute("ssh", self.ssh_args(True, target, shell_join(args)), args)

    def _remote_ssh_args(self, target: str, command: str) -> List[str]:
        effective = self.effective_ssh_target()
        if effective:
            return self.ssh_args(True, "-J", effective, target, command)
        return self.ssh_args(True, target, command)

    def run_command_on_host(self, host: str, *args: str) -> bytes:
        """Run a command on host, jumping through the effective target if needed."""
        host = host.strip()
        if not host or is_current_execution_host(host, self.effective_ssh_target()):
            return self.run_command(*args)
        if not args:
            raise ValueError("no command given")
        target = ensure_root_prefix(host)
        log.debug("run → %s: %s", target, shell_join(args))
        return self._execute("ssh", self._remote_ssh_args(target, shell_join(args)), args)

    def rtlog(self, queue: str = "", seconds: int = 0, tag: str = "") -> bytes:
        """Query EOS real-time logs for the MGM ('.') or an FST queue."""
        queue = queue or "."
        if seconds <= 0:
            seconds = 600
        tag = tag or "info"
        try:
            return self.run_command("eos", "rtlog", queue, str(seconds), tag)
        except CommandError as exc:
            raise CommandError(
                f"eos rtlog {queue} {seconds} {tag}: {exc} (output: {_snippet(exc.output)})",
                output=exc.output,
                timed_out=exc.timed_out,
            ) from exc

    def tail_log(self, file_path: str, n: int) -> bytes:
        """Last n lines of a log file on the effective target."""
        return self.tail_log_on_host("", file_path, n)

    def tail_log_on_host(self, host: str, file_path: str, n: int) -> bytes:
        """Last n lines of a log file on host."""
        tail_args = ["tail", f"-n{n}", file_path]
        effective = self.effective_ssh_target()

        if not host or is_current_execution_host(host, effective):
            try:
                return self.run_command(*tail_args)
            except CommandError as exc:
                if is_tail_log_not_found_output(exc.output):
                    raise LogFileNotFoundError(
                        f"log file not found: {file_path}", output=exc.output
                    ) from exc
                raise CommandError(
                    f"tail {file_path}: {exc} (output: {_snippet(exc.output)})",
                    output=exc.output,
                    timed_out=exc.timed_out,
                ) from exc

        target = "root@" + host
        log.debug("run → %s: %s", target, shell_join(tail_args))
        try:
            return self._execute("ssh", self._remote_ssh_args(target, shell_join(tail_args)), tail_args)
        except CommandError as exc:
            if is_tail_log_not_found_output(exc.output):
                raise LogFileNotFoundError(
                    f"log file not found: {file_path} on {host}", output=exc.output
                ) from exc
            raise CommandError(
                f"tail {file_path} on {host}: {exc} (output: {_snippet(exc.output)})",
                output=exc.output,
                timed_out=exc.timed_out,
            ) from exc

    def ssh_target_for_host(self, host: str) -> Tuple[str, str]:
        """(target, jump proxy) for an interactive shell on host; either may be empty."""
        effective = self.effective_ssh_target()
        if not host or is_current_execution_host(host, effective):
            return effective, ""
        return "root@" + host, effective