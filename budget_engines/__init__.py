"""
Module: budget_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.

Architecture position:
    Engines -- pure calculation layer.  May import budget_kernel.
    MUST NOT import budget_config; callers pass a ReferenceCalendar in.

Invariants enforced:
    - Purity: engines never call ``datetime.now()`` or ``date.today()``;
      the current time comes only from an injected Clock.
    - Exact arithmetic: no float anywhere in monetary computation.

Usage:
    from budget_engines.proration import ProrationEngine, ProrationLine
"""

from budget_engines.proration import ProrationEngine, ProrationLine
from budget_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "ProrationEngine",
    "ProrationLine",
    "compute_input_fingerprint",
    "traced_engine",
]
