"""
Budget Kernel

Pure domain core for monthly budget proration:
- Immutable monthly budget records
- Stateless reference-calendar arithmetic
- Read-only repository boundary
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
