"""
ppa/errors.py

Exceptions raised by the PPA pipeline.

Both concrete errors are fatal to a run: the pipeline either produces a
complete, consistent set of tables or stops. Rows with no region value and
rows with several region values are data-quality conditions handled inside
the reshape stage and do not raise.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class SchemaMismatch(PipelineError, ValueError):
    """The input table does not have the expected column layout."""


class DateParseError(PipelineError, ValueError):
    """An execution date could not be parsed.

    Attributes:
        row: Spreadsheet row number (or index label) of the offending record.
        value: The raw value that failed to parse.
    """

    def __init__(self, row, value):
        self.row = row
        self.value = value
        super().__init__(f"row {row}: cannot parse execution date {value!r}")


class SourceError(PipelineError):
    """The source workbook or sheet could not be opened."""
