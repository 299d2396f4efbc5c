"""
Calendar configuration set schema.

The YAML file under ``budget_config/sets/`` is the human-authored source
artifact; the loader parses it into a ``CalendarConfigSet`` whose
``calendar`` is the kernel's ``ReferenceCalendar`` -- the only thing the
engines ever see.
"""

from __future__ import annotations

from dataclasses import dataclass

from budget_kernel.domain.calendar import ReferenceCalendar


@dataclass(frozen=True)
class CalendarConfigSet:
    """A versioned, checksummed reference calendar configuration."""

    config_id: str
    version: int
    calendar: ReferenceCalendar
    checksum: str
    description: str = ""
