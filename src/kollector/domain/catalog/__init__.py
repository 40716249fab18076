"""Release ingestion: resolve lookups, detect duplicates, write, map."""

from __future__ import annotations

from kollector.domain.catalog.duplicates import DuplicateDetector
from kollector.domain.catalog.lookups import LookupService, SeedResult
from kollector.domain.catalog.mapper import ReleaseMapper, placeholder_name
from kollector.domain.catalog.queries import ReleaseQueries
from kollector.domain.catalog.requests import (
    CreateReleaseRequest,
    PurchaseInfoInput,
    ReleaseFields,
    UpdateReleaseRequest,
)
from kollector.domain.catalog.resolver import CreatedEntities, EntityResolver, LookupRef
from kollector.domain.catalog.validation import release_problems, validate_release
from kollector.domain.catalog.views import (
    ImagesView,
    PurchaseInfoView,
    ReleaseDetail,
    ReleaseSummary,
)
from kollector.domain.catalog.writer import (
    ReleaseWriter,
    ReleaseWriteResult,
    WriteProgress,
    WriteStage,
)

__all__ = [
    "CreateReleaseRequest",
    "CreatedEntities",
    "DuplicateDetector",
    "EntityResolver",
    "ImagesView",
    "LookupRef",
    "LookupService",
    "PurchaseInfoInput",
    "PurchaseInfoView",
    "ReleaseDetail",
    "ReleaseFields",
    "ReleaseMapper",
    "ReleaseQueries",
    "ReleaseSummary",
    "ReleaseWriteResult",
    "ReleaseWriter",
    "SeedResult",
    "UpdateReleaseRequest",
    "WriteProgress",
    "WriteStage",
    "placeholder_name",
    "release_problems",
    "validate_release",
]
