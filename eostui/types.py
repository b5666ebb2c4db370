"""Records describing EOS cluster state as reported by the EOS CLI."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

DEFAULT_TIMEOUT = 15.0


@dataclass
class Config:
    """Client settings: SSH gateway, per-request timeout in seconds, host-key policy."""

    ssh_target: str = ""
    timeout: float = DEFAULT_TIMEOUT
    accept_new_host_keys: bool = False


class EntryKind(str, enum.Enum):
    FILE = "file"
    CONTAINER = "dir"


@dataclass
class Entry:
    kind: EntryKind = EntryKind.FILE
    name: str = ""
    path: str = ""
    id: int = 0
    parent_id: int = 0
    inode: int = 0
    uid: int = 0
    gid: int = 0
    size: int = 0
    tree_size: int = 0
    files: int = 0
    containers: int = 0
    layout_id: int = 0
    flags: int = 0
    mode: int = 0
    locations: int = 0
    link_name: str = ""
    etag: str = ""
    modified_at: Optional[datetime] = None
    changed_at: Optional[datetime] = None
    synchronized_at: Optional[datetime] = None


@dataclass
class Directory:
    path: str = ""
    self_entry: Entry = field(default_factory=Entry)
    entries: List[Entry] = field(default_factory=list)


@dataclass
class NamespaceAttr:
    key: str = ""
    value: str = ""


@dataclass
class NodeStats:
    state: str = ""
    file_count: int = 0
    dir_count: int = 0
    boot_time: Optional[datetime] = None
    uptime: timedelta = field(default_factory=timedelta)
    current_fid: int = 0
    current_cid: int = 0
    mem_virtual: int = 0
    mem_resident: int = 0
    mem_shared: int = 0
    mem_growth: int = 0
    thread_count: int = 0
    file_descs: int = 0


@dataclass
class FstRecord:
    type: str = ""
    host: str = ""
    port: int = 0
    geotag: str = ""
    status: str = ""
    activated: str = ""
    heartbeat_delta: int = 0
    file_system_count: int = 0
    eos_version: str = ""
    kernel: str = ""
    uptime: str = ""
    thread_count: int = 0
    rss_bytes: int = 0
    vsize_bytes: int = 0
    capacity_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0
    used_files: int = 0
    disk_load: float = 0.0
    read_rate_mb: float = 0.0
    write_rate_mb: float = 0.0


@dataclass
class MgmRecord:
    host: str = ""
    port: int = 0
    qdb_host: str = ""
    qdb_port: int = 0
    role: str = ""
    qdb_role: str = ""
    geotag: str = ""
    status: str = ""
    qdb_status: str = ""
    heartbeat: str = ""
    eos_version: str = ""
    qdb_version: str = ""


@dataclass
class FileSystemRecord:
    host: str = ""
    port: int = 0
    id: int = 0
    path: str = ""
    sched_group: str = ""
    geotag: str = ""
    boot: str = ""
    config_status: str = ""
    drain_status: str = ""
    active: str = ""
    health: str = ""
    capacity_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0
    used_files: int = 0
    disk_bw_mb: float = 0.0
    disk_iops: float = 0.0
    read_rate_mb: float = 0.0
    write_rate_mb: float = 0.0


@dataclass
class GroupRecord:
    name: str = ""
    status: str = ""
    nofs: int = 0
    capacity_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0
    num_files: int = 0


@dataclass
class SpaceRecord:
    name: str = ""
    type: str = ""
    status: str = ""
    groups: int = 0
    num_files: int = 0
    num_containers: int = 0
    capacity_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0


@dataclass
class SpaceStatusRecord:
    key: str = ""
    value: str = ""


@dataclass
class VIDRecord:
    key: str = ""
    value: str = ""


@dataclass
class AccessRecord:
    category: str = ""
    rule: str = ""
    value: str = ""
    raw_key: str = ""


@dataclass
class InspectorLayoutSummary:
    layout: str = ""
    type: str = ""
    volume_bytes: int = 0
    physical_bytes: int = 0
    locations: int = 0


@dataclass
class InspectorCostRecord:
    name: str = ""
    id: int = 0
    cost: float = 0.0
    tb_years: float = 0.0


@dataclass
class InspectorBin:
    bin_seconds: int = 0
    value: int = 0


@dataclass
class InspectorStats:
    avg_file_size: int = 0
    hardlink_count: int = 0
    hardlink_volume: int = 0
    symlink_count: int = 0
    layout_count: int = 0
    top_layout: InspectorLayoutSummary = field(default_factory=InspectorLayoutSummary)
    top_user_cost: InspectorCostRecord = field(default_factory=InspectorCostRecord)
    top_group_cost: InspectorCostRecord = field(default_factory=InspectorCostRecord)
    layouts: List[InspectorLayoutSummary] = field(default_factory=list)
    user_costs: List[InspectorCostRecord] = field(default_factory=list)
    group_costs: List[InspectorCostRecord] = field(default_factory=list)
    access_files: List[InspectorBin] = field(default_factory=list)
    access_volume: List[InspectorBin] = field(default_factory=list)
    birth_files: List[InspectorBin] = field(default_factory=list)
    birth_volume: List[InspectorBin] = field(default_factory=list)


@dataclass
class NamespaceStats:
    master_host: str = ""
    total_files: int = 0
    total_directories: int = 0
    current_fid: int = 0
    current_cid: int = 0
    generated_fid: int = 0
    generated_cid: int = 0
    contention_read: float = 0.0
    contention_write: float = 0.0
    cache_files_max: int = 0
    cache_files_occup: int = 0
    cache_files_requests: int = 0
    cache_files_hits: int = 0
    cache_containers_max: int = 0
    cache_containers_occup: int = 0
    cache_containers_requests: int = 0
    cache_containers_hits: int = 0


class IOShapingMode(enum.IntEnum):
    APPS = 0
    USERS = 1
    GROUPS = 2

    def policy_type(self) -> str:
        """The policy type string used by EOS for this mode."""
        if self is IOShapingMode.USERS:
            return "uid"
        if self is IOShapingMode.GROUPS:
            return "gid"
        return "app"


@dataclass
class IOShapingRecord:
    id: str = ""
    type: str = ""
    window_sec: int = 0
    read_bps: float = 0.0
    write_bps: float = 0.0
    read_iops: float = 0.0
    write_iops: float = 0.0


@dataclass
class IOShapingPolicyRecord:
    id: str = ""
    type: str = ""
    enabled: bool = False
    limit_read_bytes_per_sec: float = 0.0
    limit_write_bytes_per_sec: float = 0.0
    reservation_read_bytes_per_sec: float = 0.0
    reservation_write_bytes_per_sec: float = 0.0


@dataclass
class IOShapingPolicyUpdate:
    mode: IOShapingMode = IOShapingMode.APPS
    id: str = ""
    enabled: bool = False
    limit_read_bytes_per_sec: int = 0
    limit_write_bytes_per_sec: int = 0
    reservation_read_bytes_per_sec: int = 0
    reservation_write_bytes_per_sec: int = 0