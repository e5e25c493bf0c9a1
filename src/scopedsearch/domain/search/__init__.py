"""Scoped query and pagination engine."""

from scopedsearch.domain.search.filters import FilterField, FilterKind, FilterSpec
from scopedsearch.domain.search.pagination import LimitPolicy
from scopedsearch.domain.search.projection import SummaryProjection
from scopedsearch.domain.search.resource import ResourceRegistry, ResourceSchema
from scopedsearch.domain.search.service import SearchService, SearchStage
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import (
    OverLimitPolicy,
    OwnershipModel,
    Page,
    Principal,
    SearchPage,
    SearchRequest,
    SortDirection,
)

__all__ = [
    "FilterField",
    "FilterKind",
    "FilterSpec",
    "LimitPolicy",
    "OverLimitPolicy",
    "OwnershipModel",
    "Page",
    "Principal",
    "ResourceRegistry",
    "ResourceSchema",
    "SearchPage",
    "SearchRequest",
    "SearchService",
    "SearchStage",
    "SortAllowlist",
    "SortDirection",
    "SummaryProjection",
]
