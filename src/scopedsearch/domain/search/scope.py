"""Scope resolution: the mandatory visibility predicate for a principal."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from scopedsearch.domain.search.filters import coerce_value, is_absent
from scopedsearch.domain.search.resource import ResourceSchema
from scopedsearch.domain.search.types import (
    Condition,
    Operator,
    OwnershipModel,
    PredicateSet,
    Principal,
    ScopePredicate,
)
from scopedsearch.shared.exceptions import ScopeError


def _principal_scope_value(principal: Principal, ownership: OwnershipModel) -> UUID | None:
    if ownership is OwnershipModel.TENANT:
        return principal.tenant_id
    if ownership is OwnershipModel.ORGANIZATION:
        return principal.organization_id
    if ownership is OwnershipModel.OWNER:
        return principal.id
    return None


def resolve_scope(principal: Principal, schema: ResourceSchema) -> ScopePredicate:
    """Derive the mandatory predicate for ``principal`` searching ``schema``.

    Owner-partitioned resources always pin the owner column to the principal's
    own id, whatever the request asks for.

    Raises:
        ScopeError: If the resource is partitioned and the principal lacks the
            tenant/organization id that partition needs.
    """
    hidden = (schema.deleted_field,) if schema.hide_deleted else ()

    if not schema.requires_scope or principal.role in schema.unscoped_roles:
        return ScopePredicate(mandatory_null=hidden)

    assert schema.scope_field is not None
    value = _principal_scope_value(principal, schema.ownership)
    if value is None:
        raise ScopeError(schema.name, schema.scope_field)

    return ScopePredicate(mandatory_equals={schema.scope_field: value}, mandatory_null=hidden)


def requested_owner_mismatch(
    principal: Principal, schema: ResourceSchema, filters: Mapping[str, Any]
) -> bool:
    """True when the request names an owner other than the principal.

    Such requests are answered with the same empty page a search for a
    nonexistent owner would get.
    """
    if schema.ownership is not OwnershipModel.OWNER:
        return False
    if principal.role in schema.unscoped_roles:
        return False
    for key in schema.owner_request_keys:
        raw = filters.get(key)
        if is_absent(raw):
            continue
        try:
            requested = raw if isinstance(raw, UUID) else UUID(str(raw).strip())
        except ValueError:
            # Not even a well-formed id, so it cannot be the principal's
            return True
        if requested != principal.id:
            return True
    return False


def owner_narrowing(
    principal: Principal, schema: ResourceSchema, filters: Mapping[str, Any]
) -> PredicateSet:
    """Owner keys as plain filters, for roles that search across owners."""
    if schema.ownership is not OwnershipModel.OWNER or principal.role not in schema.unscoped_roles:
        return PredicateSet()
    assert schema.scope_field is not None
    clauses = []
    for key in schema.owner_request_keys:
        raw = filters.get(key)
        if is_absent(raw):
            continue
        clauses.append(Condition(schema.scope_field, Operator.EQ, coerce_value(UUID, raw, key)))
    return PredicateSet(tuple(clauses))
