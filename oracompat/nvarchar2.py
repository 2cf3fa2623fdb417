"""Length rules of the NVARCHAR2 type, counted in characters."""

from __future__ import annotations

from typing import Optional


def nvarchar2_input(value: str, max_length: Optional[int] = None) -> str:
    """Accept ``value`` as input for ``nvarchar2(max_length)``.

    Trailing blanks are not trimmed; a value longer than the limit is an
    error. ``None`` or a negative limit means no limit.
    """
    if max_length is not None and max_length >= 0 and len(value) > max_length:
        raise ValueError(
            f"input value length is {len(value)}; "
            f"too long for type nvarchar2({max_length})"
        )
    return value


def nvarchar2_cast(
    value: str, max_length: Optional[int] = None, is_explicit: bool = False
) -> str:
    """Coerce ``value`` to ``nvarchar2(max_length)``.

    An explicit cast silently truncates; an implicit one raises when the
    value does not fit.
    """
    if max_length is None or max_length < 0 or len(value) <= max_length:
        return value
    if not is_explicit:
        raise ValueError(f"input value too long for type nvarchar2({max_length})")
    return value[:max_length]