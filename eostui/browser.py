"""Filtered, sorted views over the cluster tables and the filter/sort state behind them."""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from .filtering import (
    FsSortColumn,
    FstSortColumn,
    GroupSortColumn,
    SpaceSortColumn,
    access_filter_label,
    access_filter_value,
    fs_filter_label,
    fs_filter_value,
    fs_sort_label,
    fst_filter_label,
    fst_filter_value,
    fst_sort_label,
    group_filter_label,
    group_filter_value,
    matches_filter_query,
    namespace_filter_value,
    sort_direction_label,
    space_filter_label,
    space_filter_value,
    space_sort_label,
    usage_percent,
)
from .types import (
    AccessRecord,
    Directory,
    Entry,
    FileSystemRecord,
    FstRecord,
    GroupRecord,
    SpaceRecord,
)

T = TypeVar("T")

NO_SORT = -1
NAMESPACE_QUERY_COLUMN = 0
NO_FILTER_LABEL = "(no filter)"


@dataclass
class SortState:
    """Sort column (negative for unsorted) and direction."""

    column: int = NO_SORT
    desc: bool = False


@dataclass
class FilterState:
    """The column last filtered on and the active query per column."""

    column: int = 0
    filters: Dict[int, str] = field(default_factory=dict)


class View(enum.Enum):
    FST = "fst"
    FILE_SYSTEMS = "filesystems"
    NAMESPACE = "namespace"
    SPACES = "spaces"
    GROUPS = "groups"
    ACCESS = "access"


def _compare(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _less(
    a: T,
    b: T,
    sort: SortState,
    keys: Dict[int, Callable[[T], Any]],
    default: Callable[[T], Any],
    tie_breakers: Sequence[Callable[[T], Any]],
) -> bool:
    key = keys.get(int(sort.column), default)
    primary = _compare(key(a), key(b))
    if primary != 0:
        return primary > 0 if sort.desc else primary < 0
    for tie in tie_breakers:
        result = _compare(tie(a), tie(b))
        if result != 0:
            return result < 0
    return False


def _fs_usage(fs: FileSystemRecord) -> float:
    return usage_percent(fs.used_bytes, fs.capacity_bytes)


def _space_usage(space: SpaceRecord) -> float:
    return usage_percent(space.used_bytes, space.capacity_bytes)


_NODE_SORT_KEYS: Dict[int, Callable[[FstRecord], Any]] = {
    FstSortColumn.TYPE: lambda n: n.type,
    FstSortColumn.HOST: lambda n: n.host,
    FstSortColumn.PORT: lambda n: n.port,
    FstSortColumn.STATUS: lambda n: n.status,
    FstSortColumn.GEOTAG: lambda n: n.geotag,
    FstSortColumn.ACTIVATED: lambda n: n.activated,
    FstSortColumn.NOFS: lambda n: n.file_system_count,
    FstSortColumn.HEARTBEAT: lambda n: n.heartbeat_delta,
    FstSortColumn.EOS_VERSION: lambda n: n.eos_version,
}

_FS_SORT_KEYS: Dict[int, Callable[[FileSystemRecord], Any]] = {
    FsSortColumn.HOST: lambda f: f.host,
    FsSortColumn.PORT: lambda f: f.port,
    FsSortColumn.ID: lambda f: f.id,
    FsSortColumn.PATH: lambda f: f.path,
    FsSortColumn.GROUP: lambda f: f.sched_group,
    FsSortColumn.GEOTAG: lambda f: f.geotag,
    FsSortColumn.BOOT: lambda f: f.boot,
    FsSortColumn.CONFIG_STATUS: lambda f: f.config_status,
    FsSortColumn.DRAIN: lambda f: f.drain_status,
    FsSortColumn.USED: _fs_usage,
    FsSortColumn.STATUS: lambda f: f.active,
    FsSortColumn.HEALTH: lambda f: f.health,
}

_GROUP_SORT_KEYS: Dict[int, Callable[[GroupRecord], Any]] = {
    GroupSortColumn.NAME: lambda g: g.name,
    GroupSortColumn.STATUS: lambda g: g.status,
    GroupSortColumn.NOFS: lambda g: g.nofs,
    GroupSortColumn.CAPACITY: lambda g: g.capacity_bytes,
    GroupSortColumn.USED: lambda g: g.used_bytes,
    GroupSortColumn.FREE: lambda g: g.free_bytes,
    GroupSortColumn.FILES: lambda g: g.num_files,
}

_SPACE_SORT_KEYS: Dict[int, Callable[[SpaceRecord], Any]] = {
    SpaceSortColumn.NAME: lambda s: s.name,
    SpaceSortColumn.TYPE: lambda s: s.type,
    SpaceSortColumn.STATUS: lambda s: s.status,
    SpaceSortColumn.GROUPS: lambda s: s.groups,
    SpaceSortColumn.FILES: lambda s: s.num_files,
    SpaceSortColumn.DIRS: lambda s: s.num_containers,
    SpaceSortColumn.USAGE: _space_usage,
}


def less_node(a: FstRecord, b: FstRecord, sort: SortState) -> bool:
    """Whether node a sorts before b; ties go by host then port, ascending."""
    return _less(a, b, sort, _NODE_SORT_KEYS, lambda n: n.host, (lambda n: n.host, lambda n: n.port))


def less_file_system(a: FileSystemRecord, b: FileSystemRecord, sort: SortState) -> bool:
    """Whether filesystem a sorts before b; ties go by id, host, path."""
    return _less(
        a, b, sort, _FS_SORT_KEYS, lambda f: f.id,
        (lambda f: f.id, lambda f: f.host, lambda f: f.path),
    )


def less_group(a: GroupRecord, b: GroupRecord, sort: SortState) -> bool:
    """Whether group a sorts before b; ties go by name then status."""
    return _less(a, b, sort, _GROUP_SORT_KEYS, lambda g: g.name, (lambda g: g.name, lambda g: g.status))


def less_space(a: SpaceRecord, b: SpaceRecord, sort: SortState) -> bool:
    """Whether space a sorts before b; ties go by name then status."""
    return _less(a, b, sort, _SPACE_SORT_KEYS, lambda s: s.name, (lambda s: s.name, lambda s: s.status))


_NODE_EQUIVALENCE_KEYS = {
    column: key for column, key in _NODE_SORT_KEYS.items() if column != FstSortColumn.PORT
}


def equivalent_node_sort_value(column: int, a: FstRecord, b: FstRecord) -> bool:
    """Whether two nodes share the value of the sort column (host by default)."""
    key = _NODE_EQUIVALENCE_KEYS.get(int(column), lambda n: n.host)
    return key(a) == key(b)


def equivalent_file_system_sort_value(column: int, a: FileSystemRecord, b: FileSystemRecord) -> bool:
    """Whether two filesystems share the value of the sort column (id by default)."""
    key = _FS_SORT_KEYS.get(int(column), lambda f: f.id)
    return key(a) == key(b)


def next_sort_state(current: SortState, selected: int) -> SortState:
    """Cycle ascending → descending → unsorted on the selected column."""
    if current.column != selected:
        return SortState(column=selected)
    if not current.desc:
        return SortState(column=selected, desc=True)
    return SortState(column=NO_SORT)


def _sorted_by(items: List[T], less: Callable[[T, T, SortState], bool], sort: SortState) -> List[T]:
    if sort.column < 0:
        return items

    def compare(a: T, b: T) -> int:
        if less(a, b, sort):
            return -1
        if less(b, a, sort):
            return 1
        return 0

    return sorted(items, key=functools.cmp_to_key(compare))


def _matches(
    state: FilterState,
    record: T,
    value_for: Callable[[T, int], str],
    exclude_column: Optional[int],
) -> bool:
    return all(
        matches_filter_query(value_for(record, column), query)
        for column, query in state.filters.items()
        if query and column != exclude_column
    )


def _unique_sorted(values) -> List[str]:
    return sorted({value for value in values if value})


@dataclass
class Browser:
    """Cluster tables together with their filter, sort and selection state."""

    fsts: List[FstRecord] = field(default_factory=list)
    file_systems: List[FileSystemRecord] = field(default_factory=list)
    groups: List[GroupRecord] = field(default_factory=list)
    spaces: List[SpaceRecord] = field(default_factory=list)
    access_records: List[AccessRecord] = field(default_factory=list)
    directory: Directory = field(default_factory=Directory)

    fst_filter: FilterState = field(default_factory=FilterState)
    fs_filter: FilterState = field(default_factory=FilterState)
    group_filter: FilterState = field(default_factory=FilterState)
    space_filter: FilterState = field(default_factory=FilterState)
    access_filter: FilterState = field(default_factory=FilterState)
    ns_filter: FilterState = field(default_factory=FilterState)

    fst_sort: SortState = field(default_factory=SortState)
    fs_sort: SortState = field(default_factory=SortState)
    group_sort: SortState = field(default_factory=SortState)
    space_sort: SortState = field(default_factory=SortState)

    fst_column_selected: int = 0
    fs_column_selected: int = 0
    groups_column_selected: int = 0
    spaces_column_selected: int = 0
    access_column_selected: int = 0

    fst_selected: int = 0
    fs_selected: int = 0
    groups_selected: int = 0
    spaces_selected: int = 0
    access_selected: int = 0
    ns_selected: int = 0

    active_view: View = View.FST

    # Visible rows

    def visible_fsts(self) -> List[FstRecord]:
        """Nodes typed 'fst' or carrying filesystems, filtered and sorted."""
        nodes = [
            node for node in self.fsts
            if node.type.lower() == "fst" or node.file_system_count > 0
        ]
        nodes = [node for node in nodes if self.matches_node_filters(node)]
        return _sorted_by(nodes, less_node, self.fst_sort)

    def visible_file_systems(self) -> List[FileSystemRecord]:
        rows = [fs for fs in self.file_systems if self.matches_file_system_filters(fs)]
        return _sorted_by(rows, less_file_system, self.fs_sort)

    def visible_groups(self) -> List[GroupRecord]:
        rows = [g for g in self.groups if self.matches_group_filters(g)]
        return _sorted_by(rows, less_group, self.group_sort)

    def visible_access_records(self) -> List[AccessRecord]:
        return [r for r in self.access_records if self.matches_access_filters(r)]

    def visible_spaces(self) -> List[SpaceRecord]:
        rows = [s for s in self.spaces if self.matches_space_filters(s)]
        return _sorted_by(rows, less_space, self.space_sort)

    def visible_namespace_entries(self) -> List[Entry]:
        return [e for e in self.directory.entries if self.matches_namespace_filters(e)]

    # Filter matching; exclude_column skips one column's query

    def matches_node_filters(self, node: FstRecord, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.fst_filter, node, fst_filter_value, exclude_column)

    def matches_file_system_filters(self, fs: FileSystemRecord, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.fs_filter, fs, fs_filter_value, exclude_column)

    def matches_group_filters(self, group: GroupRecord, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.group_filter, group, group_filter_value, exclude_column)

    def matches_space_filters(self, space: SpaceRecord, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.space_filter, space, space_filter_value, exclude_column)

    def matches_access_filters(self, record: AccessRecord, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.access_filter, record, access_filter_value, exclude_column)

    def matches_namespace_filters(self, entry: Entry, exclude_column: Optional[int] = None) -> bool:
        return _matches(self.ns_filter, entry, lambda e, _column: namespace_filter_value(e), exclude_column)

    # Distinct values

    def unique_group_values(self, column: int) -> List[str]:
        return _unique_sorted(group_filter_value(g, column) for g in self.groups)

    def unique_space_values(self, column: int) -> List[str]:
        return _unique_sorted(space_filter_value(s, column) for s in self.spaces)

    # Sorting state

    def next_node_sort_state(self) -> SortState:
        return next_sort_state(self.fst_sort, self.fst_column_selected)

    def next_file_system_sort_state(self) -> SortState:
        return next_sort_state(self.fs_sort, self.fs_column_selected)

    def next_space_sort_state(self) -> SortState:
        return next_sort_state(self.space_sort, self.spaces_column_selected)

    @staticmethod
    def _sort_state_label(sort: SortState, label: Callable[[int], str]) -> str:
        if sort.column < 0:
            return "none"
        return f"{label(sort.column)} {sort_direction_label(sort.desc)}"

    def fst_sort_state_label(self) -> str:
        return self._sort_state_label(self.fst_sort, fst_sort_label)

    def fs_sort_state_label(self) -> str:
        return self._sort_state_label(self.fs_sort, fs_sort_label)

    def space_sort_state_label(self) -> str:
        return self._sort_state_label(self.space_sort, space_sort_label)

    def active_filter_column_label(self) -> str:
        """Label of the filter column in the active view."""
        view = self.active_view
        if view is View.FILE_SYSTEMS:
            return fs_filter_label(self.fs_filter.column)
        if view is View.NAMESPACE:
            return "entry"
        if view is View.SPACES:
            return space_filter_label(self.space_filter.column)
        if view is View.GROUPS:
            return group_filter_label(self.group_filter.column)
        if view is View.ACCESS:
            return access_filter_label(self.access_filter.column)
        return fst_filter_label(self.fst_filter.column)

    # Filter popup

    def popup_values(self, view: View, column: int) -> List[str]:
        """Candidate filter values: "" (no filter) first, then sorted distinct values
        of rows passing every other active filter."""
        if view is View.FILE_SYSTEMS:
            found = (
                fs_filter_value(fs, column) for fs in self.file_systems
                if self.matches_file_system_filters(fs, column)
            )
        elif view is View.NAMESPACE:
            found = (
                entry.name or entry.path for entry in self.directory.entries
                if self.matches_namespace_filters(entry, column)
            )
        elif view is View.SPACES:
            found = (
                space_filter_value(s, column) for s in self.spaces
                if self.matches_space_filters(s, column)
            )
        elif view is View.GROUPS:
            found = (
                group_filter_value(g, column) for g in self.groups
                if self.matches_group_filters(g, column)
            )
        elif view is View.ACCESS:
            found = (
                access_filter_value(r, column) for r in self.access_records
                if self.matches_access_filters(r, column)
            )
        else:
            found = (
                fst_filter_value(node, column) for node in self.fsts
                if self.matches_node_filters(node, column)
            )
        return [""] + _unique_sorted(found)

    def _filter_target(self, view: View) -> Tuple[FilterState, str, str]:
        if view is View.FILE_SYSTEMS:
            return self.fs_filter, "fs_selected", "Filesystem"
        if view is View.NAMESPACE:
            return self.ns_filter, "ns_selected", "Namespace"
        if view is View.SPACES:
            return self.space_filter, "spaces_selected", "Space"
        if view is View.GROUPS:
            return self.group_filter, "groups_selected", "Group"
        if view is View.ACCESS:
            return self.access_filter, "access_selected", "Access"
        return self.fst_filter, "fst_selected", "Node"

    def apply_filter(self, view: View, column: int, value: str) -> str:
        """Set or clear the filter on a column, reset the selection, return a status line."""
        value = value.strip()
        if value == NO_FILTER_LABEL:
            value = ""
        state, selected_attr, noun = self._filter_target(view)
        state.column = column
        if value:
            state.filters[column] = value
        else:
            state.filters.pop(column, None)
        setattr(self, selected_attr, 0)
        return f"{noun} filters active: {len(state.filters)}"