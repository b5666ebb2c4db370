"""Editing IO shaping policies: rate parsing and the policy edit dialog state."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .types import IOShapingMode, IOShapingPolicyRecord, IOShapingPolicyUpdate

INPUT_CHAR_LIMIT = 64
VALUE_PROMPT = "value> "

_DIGITS = re.compile(r"[0-9]+")
_NUMBER_PREFIX = re.compile(r"[0-9.]*")
_UINT64_LIMIT = 1 << 64

_MULTIPLIERS = {
    "B": 1.0,
    "K": 1e3,
    "KB": 1e3,
    "M": 1e6,
    "MB": 1e6,
    "G": 1e9,
    "GB": 1e9,
    "T": 1e12,
    "TB": 1e12,
}


class EditStage(enum.Enum):
    TARGET = "target"
    SELECT = "select"
    INPUT = "input"
    DELETE_CONFIRM = "delete_confirm"


class EditField(enum.IntEnum):
    ENABLED = 0
    LIMIT_READ = 1
    LIMIT_WRITE = 2
    RESERVATION_READ = 3
    RESERVATION_WRITE = 4
    APPLY = 5


class Button(enum.Enum):
    CANCEL = "cancel"
    CONTINUE = "continue"


def _round_half_away(value: float) -> int:
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def parse_io_shaping_rate(raw: str) -> int:
    """Parse a rate in bytes/s, with optional B/K/M/G/T(B) suffix and '/s'."""
    value = raw.upper().strip()
    value = value.removesuffix("/S")
    value = value.replace(" ", "")
    if not value:
        return 0

    if _DIGITS.fullmatch(value):
        number = int(value)
        if number < _UINT64_LIMIT:
            return number

    split = _NUMBER_PREFIX.match(value).end()
    if split == 0 or split == len(value):
        raise ValueError("use bytes/s like 15000000 or a suffix like 15MB")

    number_part, unit_part = value[:split], value[split:]
    multiplier = _MULTIPLIERS.get(unit_part)
    if multiplier is None:
        raise ValueError(f'unsupported rate unit "{unit_part}"')

    try:
        number = float(number_part)
    except ValueError:
        raise ValueError(f'invalid rate "{raw}"') from None
    if number < 0:
        raise ValueError("rate must be non-negative")
    result = _round_half_away(number * multiplier)
    if result >= _UINT64_LIMIT:
        raise ValueError(f'invalid rate "{raw}"')
    return result


def format_io_shaping_policy_rate(value: float) -> str:
    """A policy rate rounded to whole bytes/s."""
    return str(max(0, _round_half_away(value)))


_BOOL_LABELS = ("no", "yes")


def bool_label(value: bool) -> str:
    """'yes' for a true value, otherwise 'no'."""
    return _BOOL_LABELS[bool(value)]


def target_label(mode: IOShapingMode) -> str:
    """What a policy target is called in the given mode."""
    if mode is IOShapingMode.USERS:
        return "UID"
    if mode is IOShapingMode.GROUPS:
        return "GID"
    return "Application"


def target_prompt(mode: IOShapingMode) -> str:
    """Prompt shown when asking for a new policy target."""
    if mode is IOShapingMode.USERS:
        return "uid> "
    if mode is IOShapingMode.GROUPS:
        return "gid> "
    return "app> "


def find_policy(
    policies: Iterable[IOShapingPolicyRecord], mode: IOShapingMode, target_id: str
) -> Optional[IOShapingPolicyRecord]:
    """The configured policy for target_id in mode, if any."""
    policy_type = IOShapingMode(mode).policy_type()
    for policy in policies:
        if policy.type.lower() == policy_type and policy.id == target_id:
            return policy
    return None


@dataclass
class PolicyEdit:
    """State of the IO shaping policy dialog."""

    active: bool = True
    stage: EditStage = EditStage.SELECT
    mode: IOShapingMode = IOShapingMode.APPS
    target_id: str = ""
    create_mode: bool = False
    had_policy: bool = False
    enabled: bool = True
    limit_read: str = "0"
    limit_write: str = "0"
    reservation_read: str = "0"
    reservation_write: str = "0"
    selected: EditField = EditField.ENABLED
    button: Button = Button.CANCEL
    input: str = ""
    prompt: str = VALUE_PROMPT
    err: str = ""

    def policy_update(self) -> IOShapingPolicyUpdate:
        """The update these values describe; raises ValueError on a bad rate."""
        parsed = {}
        for name, label in (
            ("limit_read", "limit read"),
            ("limit_write", "limit write"),
            ("reservation_read", "reservation read"),
            ("reservation_write", "reservation write"),
        ):
            try:
                parsed[name] = parse_io_shaping_rate(getattr(self, name))
            except ValueError as exc:
                raise ValueError(f"{label}: {exc}") from exc
        return IOShapingPolicyUpdate(
            mode=self.mode,
            id=self.target_id,
            enabled=self.enabled,
            limit_read_bytes_per_sec=parsed["limit_read"],
            limit_write_bytes_per_sec=parsed["limit_write"],
            reservation_read_bytes_per_sec=parsed["reservation_read"],
            reservation_write_bytes_per_sec=parsed["reservation_write"],
        )

    _FIELD_ATTRS = {
        EditField.LIMIT_READ: "limit_read",
        EditField.LIMIT_WRITE: "limit_write",
        EditField.RESERVATION_READ: "reservation_read",
        EditField.RESERVATION_WRITE: "reservation_write",
    }

    def value_for_field(self, field: EditField) -> str:
        attr = self._FIELD_ATTRS.get(field)
        return getattr(self, attr) if attr else ""

    def set_value_for_field(self, field: EditField, value: str) -> None:
        attr = self._FIELD_ATTRS.get(field)
        if attr:
            setattr(self, attr, value)

    def _type_key(self, key: str) -> None:
        if key == "backspace":
            self.input = self.input[:-1]
        elif len(key) == 1 and key.isprintable() and len(self.input) < INPUT_CHAR_LIMIT:
            self.input += key
        self.err = ""

    def handle_key(
        self, key: str, policies: Iterable[IOShapingPolicyRecord] = ()
    ) -> Optional[Tuple[str, IOShapingPolicyUpdate]]:
        """Apply a key press. Returns ("update", update) or ("delete", update)
        when the dialog asks for a change to be carried out, else None."""
        if self.stage is EditStage.TARGET:
            return self._handle_target(key, policies)
        if self.stage is EditStage.SELECT:
            return self._handle_select(key)
        if self.stage is EditStage.DELETE_CONFIRM:
            return self._handle_delete_confirm(key)
        return self._handle_input(key)

    def _handle_target(self, key, policies):
        if key == "esc":
            self.active = False
            self.err = ""
        elif key == "enter":
            target_id = self.input.strip()
            if not target_id:
                self.err = "A target name is required."
                return None
            fresh = new_policy_edit(policies, self.mode, target_id, True)
            self.__dict__.update(fresh.__dict__)
        else:
            self._type_key(key)
        return None

    def _handle_select(self, key):
        if key == "esc":
            self.active = False
            self.err = ""
        elif key == "g":
            self.selected = EditField.ENABLED
            self.err = ""
        elif key == "G":
            self.selected = EditField.APPLY
            self.err = ""
        elif key == "d":
            if not self.had_policy:
                self.err = "No existing policy to delete."
                return None
            self.stage = EditStage.DELETE_CONFIRM
            self.button = Button.CANCEL
        elif key in ("up", "k"):
            if self.selected > EditField.ENABLED:
                self.selected = EditField(self.selected - 1)
        elif key in ("down", "j"):
            if self.selected < EditField.APPLY:
                self.selected = EditField(self.selected + 1)
        elif key == "enter":
            self.err = ""
            if self.selected is EditField.ENABLED:
                self.enabled = not self.enabled
            elif self.selected is EditField.APPLY:
                try:
                    update = self.policy_update()
                except ValueError as exc:
                    self.err = str(exc)
                    return None
                self.active = False
                return ("update", update)
            else:
                self.stage = EditStage.INPUT
                self.input = self.value_for_field(self.selected)
        return None

    def _handle_delete_confirm(self, key):
        if key == "esc":
            self.active = False
        elif key == "g":
            self.button = Button.CANCEL
        elif key == "G":
            self.button = Button.CONTINUE
        elif key in ("left", "right", "tab", "shift+tab"):
            self.button = Button.CONTINUE if self.button is Button.CANCEL else Button.CANCEL
        elif key == "enter":
            self.active = False
            if self.button is Button.CANCEL:
                return None
            return ("delete", IOShapingPolicyUpdate(mode=self.mode, id=self.target_id))
        return None

    def _handle_input(self, key):
        if key == "esc":
            self.stage = EditStage.SELECT
            self.err = ""
        elif key == "enter":
            value = self.input.strip()
            try:
                parse_io_shaping_rate(value)
            except ValueError as exc:
                self.err = str(exc)
                return None
            self.set_value_for_field(self.selected, value)
            self.stage = EditStage.SELECT
            self.err = ""
        else:
            self._type_key(key)
        return None


def new_policy_edit(
    policies: Iterable[IOShapingPolicyRecord],
    mode: IOShapingMode,
    target_id: str,
    create_mode: bool,
) -> PolicyEdit:
    """A dialog for target_id, prefilled from its configured policy if one exists."""
    edit = PolicyEdit(
        stage=EditStage.SELECT,
        mode=IOShapingMode(mode),
        target_id=target_id,
        create_mode=create_mode,
        selected=EditField.ENABLED,
        button=Button.CANCEL,
        prompt=VALUE_PROMPT,
    )
    policy = find_policy(policies, mode, target_id)
    if policy is not None:
        edit.had_policy = True
        edit.enabled = policy.enabled
        edit.limit_read = format_io_shaping_policy_rate(policy.limit_read_bytes_per_sec)
        edit.limit_write = format_io_shaping_policy_rate(policy.limit_write_bytes_per_sec)
        edit.reservation_read = format_io_shaping_policy_rate(policy.reservation_read_bytes_per_sec)
        edit.reservation_write = format_io_shaping_policy_rate(policy.reservation_write_bytes_per_sec)
    return edit