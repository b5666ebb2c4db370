import sys

import pytest

from eostui.client import Client, CommandError, LogFileNotFoundError, SubprocessRunner
from eostui.types import Config


class FakeRunner:
    def __init__(self, output=b"", error=None):
        self.output = output
        self.error = error
        self.calls = []

    def combined_output(self, name, args, timeout):
        self.calls.append((name, list(args), timeout))
        if self.error is not None:
            raise self.error
        return self.output


NOT_FOUND = b"tail: cannot open '/var/log/eos/x.log' for reading: No such file or directory"


def test_local_command_runs_directly():
    runner = FakeRunner(output=b"ok")
    client = Client(Config(), runner)
    assert client.run_command("eos", "version") == b"ok"
    assert runner.calls == [("eos", ["version"], 15.0)]


def test_ssh_command_wraps_remote():
    runner = FakeRunner()
    client = Client(Config(ssh_target="gw"), runner)
    client.run_command("eos", "ls", "/a b")
    name, args, _ = runner.calls[0]
    assert name == "ssh"
    assert args == ["-o", "LogLevel=ERROR", "-o", "BatchMode=yes", "gw", "eos ls '/a b'"]


def test_ssh_args_options():
    client = Client(Config(accept_new_host_keys=True), FakeRunner())
    args = client.ssh_args(False, "x")
    assert "BatchMode=no" in args
    assert "StrictHostKeyChecking=accept-new" in args
    assert args[-1] == "x"
    assert client.accept_new_host_keys is True


def test_resolved_target_takes_precedence():
    runner = FakeRunner()
    client = Client(Config(ssh_target="gw"), runner)
    client.set_resolved_target("root@mgm1")
    assert client.effective_ssh_target() == "root@mgm1"
    client.run_command("eos", "version")
    assert "root@mgm1" in runner.calls[0][1]
    assert "gw" not in runner.calls[0][1]


def test_run_command_on_other_host_uses_jump():
    runner = FakeRunner()
    client = Client(Config(ssh_target="gw"), runner)
    client.run_command_on_host("fst1", "uptime")
    name, args, _ = runner.calls[0]
    assert name == "ssh"
    assert args[-4:] == ["-J", "gw", "root@fst1", "uptime"]


def test_run_command_on_same_host_skips_jump():
    runner = FakeRunner()
    client = Client(Config(ssh_target="root@gw"), runner)
    client.run_command_on_host("GW", "uptime")
    assert "-J" not in runner.calls[0][1]
    assert runner.calls[0][1][-2:] == ["root@gw", "uptime"]


def test_run_command_on_host_without_gateway():
    runner = FakeRunner()
    client = Client(Config(), runner)
    client.run_command_on_host("remote-fst.example.com", "uptime")
    assert "-J" not in runner.calls[0][1]
    assert runner.calls[0][1][-2:] == ["root@remote-fst.example.com", "uptime"]


def test_rtlog_defaults():
    runner = FakeRunner(output=b"log")
    client = Client(Config(), runner)
    assert client.rtlog() == b"log"
    assert runner.calls[0][:2] == ("eos", ["rtlog", ".", "600", "info"])


def test_rtlog_error_message():
    runner = FakeRunner(error=CommandError("exit status 1", output=b"bad"))
    client = Client(Config(), runner)
    with pytest.raises(CommandError) as info:
        client.rtlog("", -1, "")
    assert "eos rtlog . 600 info" in str(info.value)
    assert info.value.output == b"bad"


def test_tail_log_not_found():
    runner = FakeRunner(error=CommandError("exit status 1", output=NOT_FOUND))
    client = Client(Config(), runner)
    with pytest.raises(LogFileNotFoundError) as info:
        client.tail_log("/var/log/eos/x.log", 10)
    assert "/var/log/eos/x.log" in str(info.value)
    assert runner.calls[0][:2] == ("tail", ["-n10", "/var/log/eos/x.log"])


def test_tail_log_other_error():
    runner = FakeRunner(error=CommandError("exit status 1", output=b"permission denied"))
    client = Client(Config(), runner)
    with pytest.raises(CommandError) as info:
        client.tail_log("/x", 5)
    assert not isinstance(info.value, LogFileNotFoundError)
    assert "permission denied" in str(info.value)


def test_tail_log_on_remote_host():
    runner = FakeRunner(error=CommandError("exit status 1", output=NOT_FOUND))
    client = Client(Config(ssh_target="gw"), runner)
    with pytest.raises(LogFileNotFoundError) as info:
        client.tail_log_on_host("fst1", "/x.log", 20)
    assert "on fst1" in str(info.value)
    assert runner.calls[0][1][-3:] == ["gw", "root@fst1", "tail -n20 /x.log"]


def test_ssh_target_for_host():
    client = Client(Config(ssh_target="root@gw"), FakeRunner())
    assert client.ssh_target_for_host("") == ("root@gw", "")
    assert client.ssh_target_for_host("gw") == ("root@gw", "")
    assert client.ssh_target_for_host("fst1") == ("root@fst1", "root@gw")
    local = Client(Config(), FakeRunner())
    assert local.ssh_target_for_host("") == ("", "")


def test_empty_command_rejected():
    with pytest.raises(ValueError):
        Client(Config(), FakeRunner()).run_command()


def test_subprocess_runner_success():
    out = SubprocessRunner().combined_output(sys.executable, ["-c", "print('hello')"], 10)
    assert out.strip() == b"hello"


def test_subprocess_runner_failure_keeps_output():
    with pytest.raises(CommandError) as info:
        SubprocessRunner().combined_output(
            sys.executable, ["-c", "import sys; print('oops'); sys.exit(3)"], 10
        )
    assert b"oops" in info.value.output
    assert "exit status 3" in str(info.value)


def test_subprocess_runner_timeout():
    with pytest.raises(CommandError) as info:
        SubprocessRunner().combined_output(sys.executable, ["-c", "import time; time.sleep(5)"], 0.2)
    assert info.value.timed_out is True