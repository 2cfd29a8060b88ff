"""Storage key generation from path templates.

A path template is a plain string with placeholders that are expanded every
time a new object is stored:

    {YYYY}  4-digit year
    {MM}    month (1-12, no zero padding)
    {DD}    day of month (no zero padding)
    {HH}    hour (0-23, no zero padding)
    {mm}    minute (no zero padding)
    {ss}    second (no zero padding)
    {UUID}  random UUID4, drawn once per call
    {code}  configured site code ("" if unset)

Unknown placeholders are left untouched. Each call reads the clock once, so
all date fields of a key are consistent with each other.
"""

import uuid
from datetime import datetime
from typing import Optional

DEFAULT_PATTERN = "{UUID}"


def resolve(pattern: str, code: str = "", now: Optional[datetime] = None) -> str:
    """Expand the placeholders of ``pattern`` into a concrete storage key.

    Args:
        pattern: Path template, e.g. ``"{code}/{YYYY}/{MM}/{DD}/{UUID}"``
        code: Site code substituted for ``{code}``
        now: Point in time used for date fields (defaults to local now)

    Returns:
        Resolved storage key

    Example:
        >>> resolve("docs/{YYYY}/{MM}", now=datetime(2024, 3, 7))
        'docs/2024/3'
    """
    if now is None:
        now = datetime.now()

    replacements = {
        "{YYYY}": f"{now.year:04d}",
        "{MM}": str(now.month),
        "{DD}": str(now.day),
        "{HH}": str(now.hour),
        "{mm}": str(now.minute),
        "{ss}": str(now.second),
        "{code}": code or "",
    }
    if "{UUID}" in pattern:
        replacements["{UUID}"] = str(uuid.uuid4())

    path = pattern
    for placeholder, value in replacements.items():
        path = path.replace(placeholder, value)
    return path
