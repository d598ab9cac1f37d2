"""
Resolution Module

Cascade, aggregation, merging and arbitration of catalog fragments into
one resolved book record.
"""

from bibresolver.resolution.cascade import CascadeResolver
from bibresolver.resolution.aggregator import ParallelAggregator
from bibresolver.resolution.merger import ClassificationMerger
from bibresolver.resolution.arbiter import SpecificityArbiter
from bibresolver.resolution.composer import (
    BookRecordComposer,
    ResolutionContext,
    BASIC_METADATA_MARKER,
)

__all__ = [
    "CascadeResolver",
    "ParallelAggregator",
    "ClassificationMerger",
    "SpecificityArbiter",
    "BookRecordComposer",
    "ResolutionContext",
    "BASIC_METADATA_MARKER",
]
