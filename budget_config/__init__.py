"""
budget_config -- single public entrypoint for reference-calendar configuration.

Responsibility:
    Provides the ONLY way to obtain the reference calendar at runtime through
    ``get_active_calendar()``.  Returns a frozen ``ReferenceCalendar`` that
    callers hand to the proration engine.

Architecture position:
    Configuration -- sits above ``budget_kernel``.  The kernel and the
    engines MUST NEVER import from ``budget_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` -- required top-level keys are missing.
    - ``CalendarConfigError`` -- calendar settings are invalid.

Audit relevance:
    Every successful ``get_active_calendar()`` call emits a
    ``BUDGET_CONFIG_TRACE`` log entry with the config id, version and
    checksum, tying each computed total to the calendar that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from budget_config.loader import load_config_set
from budget_config.schema import CalendarConfigSet
from budget_kernel.domain.calendar import ReferenceCalendar

_logger = logging.getLogger("budget_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

__all__ = [
    "CalendarConfigSet",
    "get_active_calendar",
]


def get_active_calendar(config_path: Path | None = None) -> ReferenceCalendar:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a configuration set file.
            Defaults to budget_config/sets/default.yaml.

    Returns:
        ReferenceCalendar -- the frozen runtime calendar.
    """
    config_set = load_config_set(config_path or _DEFAULT_CONFIG_PATH)

    _logger.info(
        "BUDGET_CONFIG_TRACE",
        extra={
            "trace_type": "BUDGET_CONFIG_TRACE",
            "config_set_id": config_set.config_id,
            "config_set_version": config_set.version,
            "checksum": config_set.checksum,
            "utc_offset_minutes": config_set.calendar.utc_offset_minutes,
            "fallback_days_in_month": config_set.calendar.fallback_days_in_month,
        },
    )

    return config_set.calendar
