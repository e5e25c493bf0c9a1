"""Searchable resources bundled with the service."""

from scopedsearch.config import Settings
from scopedsearch.domain.resources.insurance_policies import INSURANCE_POLICIES
from scopedsearch.domain.resources.members import MEMBERS
from scopedsearch.domain.resources.reminders import REMINDERS
from scopedsearch.domain.resources.tasks import TASKS
from scopedsearch.domain.search.resource import ResourceRegistry, ResourceSchema
from scopedsearch.infrastructure.database.models import (
    Base,
    InsurancePolicy,
    Member,
    Reminder,
    Task,
)

BUNDLED_RESOURCES: tuple[ResourceSchema, ...] = (TASKS, INSURANCE_POLICIES, REMINDERS, MEMBERS)

RESOURCE_MODELS: dict[str, type[Base]] = {
    TASKS.name: Task,
    INSURANCE_POLICIES.name: InsurancePolicy,
    REMINDERS.name: Reminder,
    MEMBERS.name: Member,
}


def build_default_registry(settings: Settings) -> ResourceRegistry:
    """Registry holding every bundled resource, with limits taken from settings."""
    registry = ResourceRegistry.from_settings(settings)
    registry.register_all(BUNDLED_RESOURCES)
    return registry


__all__ = [
    "BUNDLED_RESOURCES",
    "INSURANCE_POLICIES",
    "MEMBERS",
    "REMINDERS",
    "RESOURCE_MODELS",
    "TASKS",
    "build_default_registry",
]
