"""Reshaping, aggregation and charting pipeline for utility-scale solar PPA records.

`ppa.charts` and `ppa.run` are not imported here: charts selects the
matplotlib backend on import, so it is loaded only where a figure is drawn.
"""

from . import aggregate, config, errors, export, read, reshape, transform, validate

__all__ = [
    "aggregate",
    "config",
    "errors",
    "export",
    "read",
    "reshape",
    "transform",
    "validate",
]
