# oracompat

Oracle-flavoured helpers in plain Python, with no third-party dependencies.

## Modules

- **`oracompat.mathfuncs`**: `remainder(dividend, divisor)` returns
  `dividend - divisor * n`, where `n` is the quotient rounded half away from
  zero. Two integers give an integer. Any other mix of `int`, `float` and
  `Decimal` gives a `Decimal`, and NaN and infinities are handled as well. A
  zero divisor raises `ZeroDivisionError`.
- **`oracompat.nvarchar2`**: length rules for `NVARCHAR2(n)`, counted in
  characters. `nvarchar2_input(value, max_length)` raises `ValueError` when
  the value is too long. `nvarchar2_cast(value, max_length, is_explicit)`
  truncates on an explicit cast and raises on an implicit one.
- **`oracompat.plvdate`**: `BusinessCalendar`, a configurable calendar of
  business days. It handles weekly rest days, one-off and yearly non-business
  days, Easter Sunday and Monday, Good Friday, and national defaults for
  Czech, Germany, Poland, Austria, Slovakia, Russia, Gb and Usa. Its methods
  are `add_bizdays`, `next_bizday`, `prev_bizday`, `nearest_bizday`,
  `bizdays_between`, `isbizday`, `set_nonbizday_dow`, `unset_nonbizday_dow`,
  `set_nonbizday_day`, `unset_nonbizday_day` and `default_holidays`. The
  module also has the functions `easter_sunday(year)` (for 1900 to 2099),
  `days_inmonth`, `isleapyear` and `version`.
- **`oracompat.directories`**: `DirectoryRegistry`, which records the
  directories that file access may reach, each optionally under a symbolic
  name. `safe_path(location, filename)` builds a canonical path. The location
  may be a registered name, or a directory path that must lie below a
  registered directory; otherwise `UtlFileError` is raised with the name
  `UTL_FILE_INVALID_PATH`.
- **`oracompat.message`**: `MessageBuffer`, a FIFO of typed items
  (`ItemType`: `VARCHAR`, `NUMBER`, `DATE`, `TIMESTAMPTZ`, `BYTEA`, `RECORD`)
  with a local size limit of 8 KiB.
- **`oracompat.pipes`**: `PipeRegistry`, a thread-safe table of named pipes.
  It holds at most 30 pipes and 30 KiB of stored messages by default. Pipes
  may be implicit, explicitly registered, or private to one user. Errors are
  raised as `PipeError`, and `list_pipes()` returns `PipeInfo` records.
- **`oracompat.session`**: `PipeSession`, one user's view of a registry. It
  packs and unpacks items and sends and receives messages with a timeout in
  seconds. `send_message` and `receive_message` return `RESULT_DATA` (0) or
  `RESULT_WAIT` (1). The session also provides `unique_session_name`,
  `create_pipe`, `purge`, `remove_pipe` and `reset_buffer`.
- **`oracompat.settings`**: `Settings`, which holds `nls_date_format`,
  `timezone`, `varchar2_null_safe_concat` and `sys_guid_source`.
  `canonical_sys_guid_source(value)` checks a generator name without regard
  to case and maps `uuid_generate_v4` to `uuid_generate_v1`.

## Examples

```python
from datetime import date
from decimal import Decimal

from oracompat.mathfuncs import remainder
from oracompat.plvdate import BusinessCalendar

remainder(11, 4)                # -1
remainder(Decimal("5.5"), 2)    # Decimal('-0.5')

cal = BusinessCalendar()
cal.default_holidays("Czech")
cal.add_bizdays(date(2024, 12, 23), 1)   # date(2024, 12, 27)
```

```python
from oracompat.pipes import PipeRegistry
from oracompat.session import PipeSession, RESULT_DATA
from oracompat.message import ItemType

registry = PipeRegistry()
sender = PipeSession(registry)
receiver = PipeSession(registry)

sender.pack_message("hello")
sender.pack_message(42)
assert sender.send_message("jobs", timeout=0) == RESULT_DATA

assert receiver.receive_message("jobs", timeout=0) == RESULT_DATA
receiver.unpack_message(ItemType.VARCHAR)   # 'hello'
receiver.unpack_message(ItemType.NUMBER)    # Decimal('42')
```

```python
from oracompat.directories import DirectoryRegistry

dirs = DirectoryRegistry()
dirs.add("TMP", "/tmp")
dirs.safe_path("TMP", "report.txt")        # '/tmp/report.txt'
dirs.safe_path("/tmp/sub", "report.txt")   # '/tmp/sub/report.txt'
```

## What the package does not do

- It does not open, read, write, copy, rename or remove files.
  `DirectoryRegistry` only decides which paths are allowed.
- It has no general value functions, such as null handling, decoding or
  greatest and least, and no assertion helpers.
- `Settings` only stores and validates its values. No function in the
  package formats dates or generates GUIDs from them.
- Pipes live in the memory of one Python process. Sessions in different
  threads can share a `PipeRegistry`, but separate processes cannot.

## Installation

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```