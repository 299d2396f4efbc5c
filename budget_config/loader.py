"""
Configuration Loader (``budget_config.loader``).

Responsibility
--------------
Loads a YAML calendar configuration file and parses it into the typed
``CalendarConfigSet``.  Runtime callers go through
``budget_config.get_active_calendar()`` instead of calling this directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass.
* Unknown calendar settings are rejected rather than ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id`` / ``calendar``  -> ``KeyError`` propagates.
* Out-of-range or unknown calendar settings  -> ``CalendarConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from budget_config.schema import CalendarConfigSet
from budget_kernel.domain.calendar import ReferenceCalendar
from budget_kernel.exceptions import CalendarConfigError

_CALENDAR_FIELDS = frozenset(
    {"utc_offset_minutes", "fallback_days_in_month", "decimal_precision"}
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_calendar(data: dict[str, Any]) -> ReferenceCalendar:
    """
    Parse a ``ReferenceCalendar`` from the ``calendar`` mapping.

    Omitted settings take the ReferenceCalendar defaults.

    Raises:
        CalendarConfigError: on unknown keys or invalid values.
    """
    if not isinstance(data, dict):
        raise CalendarConfigError("calendar", data, "must be a mapping")
    unknown = sorted(set(data) - _CALENDAR_FIELDS)
    if unknown:
        raise CalendarConfigError("calendar", unknown, "unknown settings")
    return ReferenceCalendar(**data)


def parse_config_set(data: dict[str, Any]) -> CalendarConfigSet:
    """
    Parse a full configuration set.

    Raises:
        KeyError: if ``config_id`` or ``calendar`` is missing.
        CalendarConfigError: if the calendar section is invalid.
    """
    calendar = parse_calendar(data["calendar"])
    return CalendarConfigSet(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        calendar=calendar,
        checksum=compute_checksum(data),
        description=data.get("description", ""),
    )


def load_config_set(path: Path) -> CalendarConfigSet:
    """Load and parse a configuration set file."""
    return parse_config_set(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums, whatever
          the key order.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
