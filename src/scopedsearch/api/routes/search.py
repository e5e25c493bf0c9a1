"""Search API routes."""

from fastapi import APIRouter

from scopedsearch.api.deps import RegistryDep, SearchServiceDep
from scopedsearch.api.middleware.auth import CurrentPrincipal
from scopedsearch.api.schemas import (
    ResourceDescription,
    ResourceListResponse,
    SearchRequestBody,
    SearchResponse,
)
from scopedsearch.domain.search.types import SearchRequest
from scopedsearch.shared.logging import bind_search_context

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("", response_model=ResourceListResponse)
async def list_resources(
    principal: CurrentPrincipal,
    registry: RegistryDep,
) -> ResourceListResponse:
    """List the resources the caller's role may search."""
    resources = []
    for schema in registry:
        if not schema.permits(principal.role):
            continue
        assert schema.limit_policy is not None
        resources.append(
            ResourceDescription(
                name=schema.name,
                ownership=schema.ownership.value,
                filters=sorted(schema.filters.request_keys | set(schema.owner_request_keys)),
                sort_fields=sorted(schema.sort.fields),
                default_sort=schema.sort.default_field,
                default_direction=schema.sort.default_direction.value,
                default_limit=schema.limit_policy.default_limit,
                max_limit=schema.limit_policy.max_limit,
            )
        )
    return ResourceListResponse(resources=resources)


@router.patch("/{resource}", response_model=SearchResponse)
async def search_resource(
    resource: str,
    principal: CurrentPrincipal,
    service: SearchServiceDep,
    body: SearchRequestBody | None = None,
) -> SearchResponse:
    """Search one resource type.

    The body carries ``page``, ``limit``, ``sort`` and ``sortDirection`` along
    with the resource's filter keys. Results are always limited to what the
    authenticated caller may see.
    """
    bind_search_context(resource=resource)
    payload = body.to_payload() if body is not None else {}
    request = SearchRequest.from_payload(payload)
    page = await service.search(principal, resource, request)
    return SearchResponse.model_validate(page.to_dict())
