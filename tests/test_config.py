import pytest

from eostui.config import (
    Options,
    env_bool_or_default,
    env_duration_or_default,
    env_or_default,
    parse_duration,
    parse_options,
    terminal_supports_alt_screen,
)

ENV_KEYS = [
    "EOS_TUI_SSH",
    "EOS_TUI_SSH_TARGET",
    "EOS_TUI_TIMEOUT",
    "EOS_TUI_NO_ALT_SCREEN",
    "EOS_TUI_SSH_ACCEPT_NEW_HOST_KEYS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_parse_duration_seconds():
    assert parse_duration("15s") == 15.0
    assert parse_duration("0") == 0.0


def test_parse_duration_compound_equivalence():
    assert parse_duration("1m30s") == parse_duration("90s")
    assert parse_duration("1h") == parse_duration("60m")
    assert parse_duration("-2s") == -parse_duration("2s")


def test_parse_duration_millis():
    assert parse_duration("300ms") == pytest.approx(0.3)


@pytest.mark.parametrize("value", ["", "15", "abc", "5x", "s", "-"])
def test_parse_duration_invalid(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_env_or_default_order(clean_env):
    assert env_or_default(["EOS_TUI_SSH", "EOS_TUI_SSH_TARGET"], "fb") == "fb"
    clean_env.setenv("EOS_TUI_SSH_TARGET", "second")
    assert env_or_default(["EOS_TUI_SSH", "EOS_TUI_SSH_TARGET"], "fb") == "second"
    clean_env.setenv("EOS_TUI_SSH", "first")
    assert env_or_default(["EOS_TUI_SSH", "EOS_TUI_SSH_TARGET"], "fb") == "first"


def test_env_duration(clean_env):
    assert env_duration_or_default("EOS_TUI_TIMEOUT", 7.0) == 7.0
    clean_env.setenv("EOS_TUI_TIMEOUT", "bogus")
    assert env_duration_or_default("EOS_TUI_TIMEOUT", 7.0) == 7.0
    clean_env.setenv("EOS_TUI_TIMEOUT", "30s")
    assert env_duration_or_default("EOS_TUI_TIMEOUT", 7.0) == parse_duration("30s")


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), (" YES ", True), ("on", True), ("0", False), ("Off", False), ("no", False)],
)
def test_env_bool_values(clean_env, raw, expected):
    clean_env.setenv("EOS_TUI_NO_ALT_SCREEN", raw)
    assert env_bool_or_default("EOS_TUI_NO_ALT_SCREEN", not expected) is expected


def test_env_bool_fallback(clean_env):
    clean_env.setenv("EOS_TUI_NO_ALT_SCREEN", "maybe")
    assert env_bool_or_default("EOS_TUI_NO_ALT_SCREEN", True) is True
    assert env_bool_or_default("EOS_TUI_NO_ALT_SCREEN", False) is False


@pytest.mark.parametrize("term, expected", [("dumb", False), ("xterm-256color", True), ("", False)])
def test_terminal_alt_screen(monkeypatch, term, expected):
    monkeypatch.setenv("TERM", term)
    assert terminal_supports_alt_screen() is expected


def test_version_subcommand(clean_env):
    assert parse_options(["version"]).show_version is True
    assert parse_options(["--version"]).show_version is True


def test_defaults(clean_env):
    assert parse_options([]) == Options()


def test_flags(clean_env):
    options = parse_options(
        ["--ssh", "gw", "--timeout", "30s", "--no-alt-screen", "--ssh-accept-new-host-keys"]
    )
    assert options.ssh_target == "gw"
    assert options.timeout == parse_duration("30s")
    assert options.no_alt_screen is True
    assert options.accept_new_host_keys is True


def test_single_dash_flags(clean_env):
    options = parse_options(["-ssh", "gw", "-timeout", "1m"])
    assert options.ssh_target == "gw"
    assert options.timeout == parse_duration("60s")


def test_env_defaults_used(clean_env):
    clean_env.setenv("EOS_TUI_SSH", "envhost")
    clean_env.setenv("EOS_TUI_NO_ALT_SCREEN", "true")
    options = parse_options([])
    assert options.ssh_target == "envhost"
    assert options.no_alt_screen is True


def test_invalid_timeout_exits(clean_env):
    with pytest.raises(SystemExit):
        parse_options(["--timeout", "nonsense"])