"""Session settings of the compatibility functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_SYS_GUID_SOURCES = {
    "uuid_generate_v1": "uuid_generate_v1",
    "uuid_generate_v1mc": "uuid_generate_v1mc",
    # This choice has always resolved to the version 1 generator.
    "uuid_generate_v4": "uuid_generate_v1",
    "gen_random_uuid": "gen_random_uuid",
}


def canonical_sys_guid_source(value: str) -> str:
    """Return the canonical generator name for ``value`` (case-insensitive)."""
    try:
        return _SYS_GUID_SOURCES[value.lower()]
    except KeyError:
        raise ValueError(f"invalid value for sys_guid_source: {value!r}") from None


@dataclass
class Settings:
    """Settings: date output format, sysdate time zone, concatenation rule
    and the generator behind ``sys_guid``."""

    nls_date_format: Optional[str] = None
    timezone: str = "GMT"
    varchar2_null_safe_concat: bool = False
    sys_guid_source: str = "uuid_generate_v1"

    def __post_init__(self) -> None:
        self.sys_guid_source = canonical_sys_guid_source(self.sys_guid_source)

    def set_sys_guid_source(self, value: str) -> None:
        """Validate and store the generator used by ``sys_guid``."""
        self.sys_guid_source = canonical_sys_guid_source(value)