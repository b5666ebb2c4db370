"""Column definitions, filter matching, cell values and labels for the tables."""

from __future__ import annotations

import enum
import functools
import re
from typing import Callable, Dict, Optional, TypeVar

from .types import (
    AccessRecord,
    Entry,
    EntryKind,
    FileSystemRecord,
    FstRecord,
    GroupRecord,
    SpaceRecord,
)

T = TypeVar("T")


class FstFilterColumn(enum.IntEnum):
    HOST = 0
    PORT = 1
    GEOTAG = 2
    STATUS = 3
    ACTIVATED = 4
    HEARTBEAT_DELTA = 5
    NOFS = 6
    EOS_VERSION = 7
    TYPE = 8


class FstSortColumn(enum.IntEnum):
    NONE = -1
    HOST = 0
    PORT = 1
    GEOTAG = 2
    STATUS = 3
    ACTIVATED = 4
    HEARTBEAT = 5
    NOFS = 6
    EOS_VERSION = 7
    TYPE = 8


class FsFilterColumn(enum.IntEnum):
    HOST = 0
    PORT = 1
    ID = 2
    PATH = 3
    GROUP = 4
    GEOTAG = 5
    BOOT = 6
    CONFIG_STATUS = 7
    DRAIN = 8
    USAGE = 9
    STATUS = 10
    HEALTH = 11


class FsSortColumn(enum.IntEnum):
    NONE = -1
    HOST = 0
    PORT = 1
    ID = 2
    PATH = 3
    GROUP = 4
    GEOTAG = 5
    BOOT = 6
    CONFIG_STATUS = 7
    DRAIN = 8
    USED = 9
    STATUS = 10
    HEALTH = 11


class GroupFilterColumn(enum.IntEnum):
    NAME = 0
    STATUS = 1
    NOFS = 2
    CAPACITY = 3
    USED = 4
    FREE = 5
    FILES = 6


class GroupSortColumn(enum.IntEnum):
    NONE = -1
    NAME = 0
    STATUS = 1
    NOFS = 2
    CAPACITY = 3
    USED = 4
    FREE = 5
    FILES = 6


class SpaceFilterColumn(enum.IntEnum):
    NAME = 0
    TYPE = 1
    STATUS = 2
    GROUPS = 3
    FILES = 4
    DIRS = 5
    USAGE = 6


class SpaceSortColumn(enum.IntEnum):
    NONE = -1
    NAME = 0
    TYPE = 1
    STATUS = 2
    GROUPS = 3
    FILES = 4
    DIRS = 5
    USAGE = 6


class AccessFilterColumn(enum.IntEnum):
    CATEGORY = 0
    RULE = 1
    VALUE = 2


def matches_filter_query(value: str, query: str) -> bool:
    """Case-insensitive substring match, or a whole-value glob when query has * or ?."""
    query = query.strip().lower()
    if not query:
        return True
    value = value.lower()
    if "*" not in query and "?" not in query:
        return query in value
    return matches_glob_pattern(value, query)


@functools.lru_cache(maxsize=1024)
def _glob_regex(pattern: str) -> Optional["re.Pattern[str]"]:
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    try:
        return re.compile("".join(parts))
    except re.error:
        return None


def matches_glob_pattern(value: str, pattern: str) -> bool:
    """Whether the whole value matches a glob with * and ? wildcards."""
    regex = _glob_regex(pattern)
    return regex is not None and regex.fullmatch(value) is not None


def usage_percent(used: int, capacity: int) -> float:
    """Used space as a percentage of capacity; 0 when capacity is unknown."""
    if capacity <= 0:
        return 0.0
    return used / capacity * 100.0


_BYTE_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


def human_bytes(n: int) -> str:
    """Byte count in binary units, e.g. '1.5 GiB'."""
    if n < 1024:
        return f"{n} B"
    value = float(n)
    unit = _BYTE_UNITS[0]
    for unit in _BYTE_UNITS:
        value /= 1024.0
        if value < 1024.0:
            break
    return f"{value:.1f} {unit}"


_ENTRY_KIND_LABELS = {
    EntryKind.CONTAINER: "dir",
    EntryKind.FILE: "file",
}


def entry_type_label(entry: Entry) -> str:
    """Short label for an entry's kind: 'dir' or 'file'."""
    return _ENTRY_KIND_LABELS.get(entry.kind, "file")


def _pick(table: Dict[int, Callable[[], T]], column: int, default: Callable[[], T]) -> T:
    return table.get(int(column), default)()


def fst_filter_value(node: FstRecord, column: int) -> str:
    table = {
        FstFilterColumn.HOST: lambda: node.host,
        FstFilterColumn.PORT: lambda: str(node.port),
        FstFilterColumn.GEOTAG: lambda: node.geotag,
        FstFilterColumn.STATUS: lambda: node.status,
        FstFilterColumn.ACTIVATED: lambda: node.activated,
        FstFilterColumn.HEARTBEAT_DELTA: lambda: str(node.heartbeat_delta),
        FstFilterColumn.NOFS: lambda: str(node.file_system_count),
        FstFilterColumn.EOS_VERSION: lambda: node.eos_version,
        FstFilterColumn.TYPE: lambda: node.type,
    }
    return _pick(table, column, lambda: node.host)


def fs_filter_value(fs: FileSystemRecord, column: int) -> str:
    table = {
        FsFilterColumn.PORT: lambda: str(fs.port),
        FsFilterColumn.ID: lambda: str(fs.id),
        FsFilterColumn.PATH: lambda: fs.path,
        FsFilterColumn.GROUP: lambda: fs.sched_group,
        FsFilterColumn.GEOTAG: lambda: fs.geotag,
        FsFilterColumn.BOOT: lambda: fs.boot,
        FsFilterColumn.CONFIG_STATUS: lambda: fs.config_status,
        FsFilterColumn.DRAIN: lambda: fs.drain_status,
        FsFilterColumn.USAGE: lambda: f"{usage_percent(fs.used_bytes, fs.capacity_bytes):.2f}",
        FsFilterColumn.STATUS: lambda: fs.active,
        FsFilterColumn.HEALTH: lambda: fs.health,
    }
    return _pick(table, column, lambda: fs.host)


def group_filter_value(group: GroupRecord, column: int) -> str:
    table = {
        GroupFilterColumn.NAME: lambda: group.name,
        GroupFilterColumn.STATUS: lambda: group.status,
        GroupFilterColumn.NOFS: lambda: str(group.nofs),
        GroupFilterColumn.CAPACITY: lambda: human_bytes(group.capacity_bytes),
        GroupFilterColumn.USED: lambda: human_bytes(group.used_bytes),
        GroupFilterColumn.FREE: lambda: human_bytes(group.free_bytes),
        GroupFilterColumn.FILES: lambda: str(group.num_files),
    }
    return _pick(table, column, lambda: group.name)


def space_filter_value(space: SpaceRecord, column: int) -> str:
    table = {
        SpaceFilterColumn.NAME: lambda: space.name,
        SpaceFilterColumn.TYPE: lambda: space.type,
        SpaceFilterColumn.STATUS: lambda: space.status,
        SpaceFilterColumn.GROUPS: lambda: str(space.groups),
        SpaceFilterColumn.FILES: lambda: str(space.num_files),
        SpaceFilterColumn.DIRS: lambda: str(space.num_containers),
        SpaceFilterColumn.USAGE: lambda: f"{usage_percent(space.used_bytes, space.capacity_bytes):.2f}",
    }
    return _pick(table, column, lambda: space.name)


def access_filter_value(record: AccessRecord, column: int) -> str:
    table = {
        AccessFilterColumn.CATEGORY: lambda: record.category,
        AccessFilterColumn.RULE: lambda: record.rule,
        AccessFilterColumn.VALUE: lambda: record.value,
    }
    return _pick(table, column, lambda: record.category)


def namespace_filter_value(entry: Entry) -> str:
    """Name, path and kind of an entry joined for free-text matching."""
    return f"{entry.name} {entry.path} {entry_type_label(entry)}".strip()


_FST_FILTER_LABELS = {
    FstFilterColumn.HOST: "host",
    FstFilterColumn.PORT: "port",
    FstFilterColumn.GEOTAG: "geotag",
    FstFilterColumn.STATUS: "status",
    FstFilterColumn.ACTIVATED: "activated",
    FstFilterColumn.HEARTBEAT_DELTA: "heartbeatdelta",
    FstFilterColumn.NOFS: "nofs",
    FstFilterColumn.EOS_VERSION: "eos version",
    FstFilterColumn.TYPE: "type",
}

_FST_SORT_LABELS = {
    FstSortColumn.HOST: "host",
    FstSortColumn.PORT: "port",
    FstSortColumn.GEOTAG: "geotag",
    FstSortColumn.STATUS: "status",
    FstSortColumn.ACTIVATED: "activated",
    FstSortColumn.HEARTBEAT: "heartbeatdelta",
    FstSortColumn.NOFS: "nofs",
    FstSortColumn.EOS_VERSION: "eos version",
    FstSortColumn.TYPE: "type",
    FstSortColumn.NONE: "none",
}

_FS_FILTER_LABELS = {
    FsFilterColumn.HOST: "host",
    FsFilterColumn.PORT: "port",
    FsFilterColumn.ID: "id",
    FsFilterColumn.PATH: "path",
    FsFilterColumn.GROUP: "schedgroup",
    FsFilterColumn.GEOTAG: "geotag",
    FsFilterColumn.BOOT: "boot",
    FsFilterColumn.CONFIG_STATUS: "configstatus",
    FsFilterColumn.DRAIN: "drain",
    FsFilterColumn.USAGE: "usage %",
    FsFilterColumn.STATUS: "active",
    FsFilterColumn.HEALTH: "health",
}

_FS_SORT_LABELS = {
    FsSortColumn.HOST: "host",
    FsSortColumn.PORT: "port",
    FsSortColumn.ID: "id",
    FsSortColumn.PATH: "path",
    FsSortColumn.GROUP: "schedgroup",
    FsSortColumn.GEOTAG: "geotag",
    FsSortColumn.BOOT: "boot",
    FsSortColumn.CONFIG_STATUS: "configstatus",
    FsSortColumn.DRAIN: "drain",
    FsSortColumn.USED: "usage %",
    FsSortColumn.STATUS: "active",
    FsSortColumn.HEALTH: "health",
    FsSortColumn.NONE: "none",
}

_GROUP_FILTER_LABELS = {
    GroupFilterColumn.NAME: "name",
    GroupFilterColumn.STATUS: "status",
    GroupFilterColumn.NOFS: "nofs",
    GroupFilterColumn.CAPACITY: "capacity",
    GroupFilterColumn.USED: "used",
    GroupFilterColumn.FREE: "free",
    GroupFilterColumn.FILES: "files",
}

_GROUP_SORT_LABELS = {
    GroupSortColumn.NAME: "name",
    GroupSortColumn.STATUS: "status",
    GroupSortColumn.NOFS: "nofs",
    GroupSortColumn.CAPACITY: "capacity",
    GroupSortColumn.USED: "used",
    GroupSortColumn.FREE: "free",
    GroupSortColumn.FILES: "files",
    GroupSortColumn.NONE: "none",
}

_SPACE_FILTER_LABELS = {
    SpaceFilterColumn.NAME: "name",
    SpaceFilterColumn.TYPE: "type",
    SpaceFilterColumn.STATUS: "status",
    SpaceFilterColumn.GROUPS: "groups",
    SpaceFilterColumn.FILES: "files",
    SpaceFilterColumn.DIRS: "dirs",
    SpaceFilterColumn.USAGE: "usage %",
}

_SPACE_SORT_LABELS = {
    SpaceSortColumn.NAME: "name",
    SpaceSortColumn.TYPE: "type",
    SpaceSortColumn.STATUS: "status",
    SpaceSortColumn.GROUPS: "groups",
    SpaceSortColumn.FILES: "files",
    SpaceSortColumn.DIRS: "dirs",
    SpaceSortColumn.USAGE: "usage %",
    SpaceSortColumn.NONE: "none",
}

_ACCESS_FILTER_LABELS = {
    AccessFilterColumn.CATEGORY: "category",
    AccessFilterColumn.RULE: "rule",
    AccessFilterColumn.VALUE: "value",
}


def fst_filter_label(column: int) -> str:
    return _FST_FILTER_LABELS.get(int(column), "host")


def fst_sort_label(column: int) -> str:
    return _FST_SORT_LABELS.get(int(column), "host")


def fs_filter_label(column: int) -> str:
    return _FS_FILTER_LABELS.get(int(column), "host")


def fs_sort_label(column: int) -> str:
    return _FS_SORT_LABELS.get(int(column), "host")


def group_filter_label(column: int) -> str:
    return _GROUP_FILTER_LABELS.get(int(column), "name")


def group_sort_label(column: int) -> str:
    return _GROUP_SORT_LABELS.get(int(column), "name")


def space_filter_label(column: int) -> str:
    return _SPACE_FILTER_LABELS.get(int(column), "name")


def space_sort_label(column: int) -> str:
    return _SPACE_SORT_LABELS.get(int(column), "name")


def access_filter_label(column: int) -> str:
    return _ACCESS_FILTER_LABELS.get(int(column), "category")


_DIRECTION_LABELS = ("asc", "desc")


def sort_direction_label(desc: bool) -> str:
    """'desc' for a descending sort, otherwise 'asc'."""
    return _DIRECTION_LABELS[bool(desc)]


_NODE_ENUM_COLUMNS = frozenset(
    {FstFilterColumn.TYPE, FstFilterColumn.STATUS, FstFilterColumn.ACTIVATED}
)
_FS_ENUM_COLUMNS = frozenset(
    {FsFilterColumn.BOOT, FsFilterColumn.CONFIG_STATUS, FsFilterColumn.DRAIN, FsFilterColumn.STATUS}
)


def node_column_is_enum(column: int) -> bool:
    """Whether the node column holds a small set of discrete values."""
    return int(column) in _NODE_ENUM_COLUMNS


def fs_column_is_enum(column: int) -> bool:
    """Whether the filesystem column holds a small set of discrete values."""
    return int(column) in _FS_ENUM_COLUMNS