"""Identifier parsing, sequential batch processing and progress reporting."""

from caseintake.batch.controller import BatchController
from caseintake.batch.parser import (
    count_identifiers,
    filter_identifiers,
    parse_identifiers,
    sanitize_input,
)
from caseintake.batch.processor import BatchProcessor
from caseintake.batch.reporter import ProgressReporter

__all__ = [
    "BatchController",
    "BatchProcessor",
    "ProgressReporter",
    "count_identifiers",
    "filter_identifiers",
    "parse_identifiers",
    "sanitize_input",
]
