# eostui

Building blocks for an interactive console that manages an EOS storage
cluster. The package covers four jobs:

- **Running commands** such as `eos` and `tail` on the local machine or over
  SSH. A command can also go to another cluster host, using the SSH target as
  a jump proxy.
- **Filtering and sorting** the tables a console shows: nodes, filesystems,
  groups, spaces, access rules and namespace entries.
- **Editing IO shaping policies**, including parsing rates such as `15MB`.
- **Cleaning command output** so that it is safe to put on a terminal.

The package uses only the standard library.

## Modules

| Module | Purpose |
| --- | --- |
| `eostui.types` | Dataclasses for cluster state (`FstRecord`, `FileSystemRecord`, `GroupRecord`, `SpaceRecord`, `AccessRecord`, `Entry`, `Directory`, ...), `Config`, and the `IOShapingMode` enum |
| `eostui.hosts` | Host name handling: `canonical_host`, `short_host`, `matches_local_host`, `is_current_execution_host`, `ensure_root_prefix`, `shell_join`, `is_tail_log_not_found_output` |
| `eostui.client` | `Client` runs commands locally or over SSH; failures raise `CommandError` or `LogFileNotFoundError` |
| `eostui.config` | Option parsing with environment defaults: `parse_options`, `Options`, `parse_duration`, `env_or_default`, `env_duration_or_default`, `env_bool_or_default`, `terminal_supports_alt_screen` |
| `eostui.filtering` | Column enums, cell values, column labels, and substring and glob matching (`matches_filter_query`), plus `usage_percent` and `human_bytes` |
| `eostui.browser` | `Browser` holds the tables with their filter, sort and selection state; `SortState`, `FilterState`, `View`, and comparison helpers such as `less_node` and `next_sort_state` |
| `eostui.ioshaping` | IO shaping policy dialog state (`PolicyEdit`, `new_policy_edit`) and `parse_io_shaping_rate` |
| `eostui.logtext` | Output cleanup: `strip_ansi`, `sanitize_log_lines`, `split_log_output`, `clean_qdb_coup_output`, `missing_log_file_message` |

## Running commands

`Client` takes a `Config` that holds an SSH target, a timeout in seconds
(15 by default) and a host-key policy. With no SSH target, commands run
locally. With a target, each command is quoted into one line and run through
`ssh -o LogLevel=ERROR -o BatchMode=yes`. When `accept_new_host_keys` is set,
`-o StrictHostKeyChecking=accept-new` is added.

```python
from eostui.client import Client
from eostui.types import Config

client = Client(Config(ssh_target="gateway.example.com"))
client.ssh_target_for_host("fst01.example.com")
# ("root@fst01.example.com", "gateway.example.com")

client.run_command("eos", "version")        # bytes, stdout and stderr combined
client.tail_log_on_host("fst01.example.com", "/var/log/eos/fst/xrdlog.fst", 200)
client.rtlog()                              # eos rtlog . 600 info
```

- `run_command_on_host` and `tail_log_on_host` reach other hosts as
  `root@host`, using the effective target as the `-J` jump proxy.
- A host that names the current target runs the command directly, and so
  does the local machine when there is no target.
- `set_resolved_target` replaces the effective target, for example with a
  known MGM master. `effective_ssh_target` reports which target is in use.

A failing command raises `CommandError`. Its `output` attribute holds the
combined output, and `timed_out` tells whether the time limit ran out. When
`tail` reports that the file does not exist, `LogFileNotFoundError` is raised
instead. It is a subclass of `CommandError`.

The process runner can be replaced. Pass any object with a
`combined_output(name, args, timeout)` method as the `runner` argument. The
default is `SubprocessRunner`.

## Filtering and sorting

Filter queries match substrings without regard to case. They switch to
whole-value glob matching when the query contains `*` or `?`:

```python
from eostui.filtering import matches_filter_query

matches_filter_query("default.0", "FAULT")   # True
matches_filter_query("default.0", "d*t.0")   # True
matches_filter_query("node01", "node1?")     # False
```

A `Browser` applies the filters and the sort order of each table:

```python
from eostui.browser import Browser, SortState, View
from eostui.filtering import GroupFilterColumn, GroupSortColumn
from eostui.types import GroupRecord

browser = Browser(groups=[
    GroupRecord(name="default.1", nofs=5),
    GroupRecord(name="spare.1", nofs=10),
    GroupRecord(name="default.2", nofs=3),
])
browser.apply_filter(View.GROUPS, GroupFilterColumn.NAME, "default")
# "Group filters active: 1"
browser.group_sort = SortState(column=GroupSortColumn.NOFS)
[g.name for g in browser.visible_groups()]   # ["default.2", "default.1"]
```

- `next_sort_state` cycles a column through ascending, descending and
  unsorted.
- `popup_values` lists candidate values for a filter column. It offers `""`
  (no filter) first, then the sorted distinct values of the rows that pass
  every other active filter.
- The node table shows only nodes whose type is `fst`, or that carry
  filesystems.

## IO shaping policies

Rates accept raw bytes per second, or a decimal unit suffix (`B`, `K`/`KB`,
`M`/`MB`, `G`/`GB`, `T`/`TB`). A trailing `/s` is allowed:

```python
from eostui.ioshaping import parse_io_shaping_rate

parse_io_shaping_rate("15000000")   # 15000000
parse_io_shaping_rate("15MB")       # 15000000
parse_io_shaping_rate("1.5 GB/s")   # 1500000000
parse_io_shaping_rate("")           # 0
```

An unknown unit or a malformed value raises `ValueError`.

`new_policy_edit` builds a `PolicyEdit` for a target. If the target already
has a policy, its values are filled in. `PolicyEdit.handle_key` takes key
names such as `"up"`, `"enter"`, `"esc"` or single characters. It returns
`("update", update)` or `("delete", update)` when the dialog asks for a
change, and `None` otherwise. Carrying out the change is left to the caller.

## Log output

```python
from eostui.logtext import sanitize_log_lines

sanitize_log_lines(["\x1b[31mred\x1b[0m\r", "tab\tkept"])
# ["red", "tab\tkept"]
```

`clean_qdb_coup_output` also drops blank lines and OpenSSH's post-quantum
key exchange warnings.

## Options and environment

`eostui.config.parse_options(argv)` returns an `Options`. Each option falls
back to an environment variable. A first argument of `version` returns
options with `show_version` set.

| Option | Environment variable | Meaning |
| --- | --- | --- |
| `--version` | | Ask for the version |
| `--ssh TARGET` | `EOS_TUI_SSH`, or `EOS_TUI_SSH_TARGET` | Run commands on a remote host over SSH |
| `--timeout DURATION` | `EOS_TUI_TIMEOUT` | Time limit for each request, such as `15s` or `1m30s` (default `15s`) |
| `--no-alt-screen` | `EOS_TUI_NO_ALT_SCREEN` | Turn off the alternate screen |
| `--ssh-accept-new-host-keys` | `EOS_TUI_SSH_ACCEPT_NEW_HOST_KEYS` | Pass `StrictHostKeyChecking=accept-new` to SSH |

Yes/no variables accept `1`, `true`, `yes` and `on`, or `0`, `false`, `no`
and `off`. Any other value leaves the default in place. An unparseable
`EOS_TUI_TIMEOUT` also leaves the default in place.

## What the package does not do

- It has no interactive screen and installs no command. Options are parsed,
  but nothing here draws a console or responds to a terminal.
- `Client` runs commands and returns their raw output. It does not parse EOS
  listings into the record types, and it does not discover the MGM master
  itself.
- It does not change cluster state on its own. Policy edits and filter
  changes only describe what should happen.

## Tests

The tests use pytest, which comes with the `test` extra:

```
pip install -e ".[test]"
pytest
```