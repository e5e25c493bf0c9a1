"""Request and response contracts of the search API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ----- Request Schemas -----


class SearchRequestBody(BaseModel):
    """Search body: paging and sort keys plus any number of filter keys.

    Filter keys are not declared here; they arrive as extra fields and are
    checked against the resource's filter allowlist by the engine.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Left untyped so page/limit/sort values are judged by the engine
    page: Any = None
    limit: Any = None
    sort: Any = None
    sort_direction: Any = Field(default=None, alias="sortDirection")
    order: Any = None

    def to_payload(self) -> dict[str, Any]:
        """Flatten back into the wire mapping the engine reads."""
        payload: dict[str, Any] = {
            key: value
            for key, value in (
                ("page", self.page),
                ("limit", self.limit),
                ("sort", self.sort),
                ("sortDirection", self.sort_direction),
                ("order", self.order),
            )
            if value is not None
        }
        payload.update(self.model_extra or {})
        return payload


# ----- Response Schemas -----


class PaginationResponse(BaseModel):
    """Pagination metadata."""

    current: int
    limit: int
    records: int
    pages: int


class SearchResponse(BaseModel):
    """One page of projected summaries."""

    pagination: PaginationResponse
    data: list[dict[str, Any]]


class ResourceDescription(BaseModel):
    """Searchable resource as advertised to clients."""

    name: str
    ownership: str
    filters: list[str]
    sort_fields: list[str]
    default_sort: str
    default_direction: str
    default_limit: int
    max_limit: int


class ResourceListResponse(BaseModel):
    """All resources the caller may search."""

    resources: list[ResourceDescription]
