from unittest import mock

import pytest

from eostui.hosts import (
    canonical_host,
    ensure_root_prefix,
    is_current_execution_host,
    is_tail_log_not_found_output,
    matches_local_host,
    shell_join,
    short_host,
)


def test_canonical_host_normalises():
    assert canonical_host("  root@Node01.Example.COM.  ") == "node01.example.com"


def test_canonical_host_strips_port():
    assert canonical_host("node01.example.com:1095") == canonical_host("node01.example.com")


@pytest.mark.parametrize("value", ["::1", "[::1]", " root@::1 "])
def test_canonical_host_ipv6_loopback(value):
    assert canonical_host(value) == "::1"


def test_canonical_host_idempotent():
    once = canonical_host("root@Host.Example.com.")
    assert canonical_host(once) == once


def test_short_host():
    assert short_host("root@Node01.example.com") == "node01"
    assert short_host("plain") == "plain"


def test_current_host_empty_is_current():
    assert is_current_execution_host("", "root@gw") is True
    assert is_current_execution_host("   ", "") is True


def test_current_host_matches_effective():
    assert is_current_execution_host("MGM1.example.com", "root@mgm1.example.com") is True
    assert is_current_execution_host("fst1.example.com", "root@mgm1.example.com") is False


def test_local_names():
    assert matches_local_host("localhost") is True
    assert matches_local_host("127.0.0.1") is True
    assert matches_local_host("") is False


def test_local_hostname_match():
    with mock.patch("socket.gethostname", return_value="myhost.example.com"):
        assert matches_local_host("MYHOST") is True
        assert matches_local_host("myhost.example.com") is True
        assert matches_local_host("other") is False
        assert is_current_execution_host("myhost", "") is True


def test_local_hostname_error():
    with mock.patch("socket.gethostname", side_effect=OSError("boom")):
        assert matches_local_host("other") is False
        assert matches_local_host("localhost") is True


def test_ensure_root_prefix():
    assert ensure_root_prefix("fst1") == "root@fst1"
    assert ensure_root_prefix("root@fst1") == "root@fst1"
    assert ensure_root_prefix(ensure_root_prefix("fst1")) == "root@fst1"


def test_shell_join_quotes():
    assert shell_join(["echo", "a b"]) == "echo 'a b'"
    assert shell_join(["eos", "version"]) == "eos version"


def test_tail_not_found_detection():
    assert is_tail_log_not_found_output(
        b"tail: cannot open '/var/log/x' for reading: No such file or directory"
    )
    assert is_tail_log_not_found_output("No such file or directory") is True
    assert is_tail_log_not_found_output(b"permission denied") is False