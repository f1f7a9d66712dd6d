"""Resource registry describing the Insightly API surface."""

import logging
from dataclasses import dataclass, field
from typing import Any

from .models import ResourceNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceDefinition:
    """
    Declarative description of one API resource.

    The client derives its per-resource methods from these entries, e.g. the
    "contacts" entry yields get_contacts, get_contact, add_contact,
    delete_contact and get_contact_emails.
    """
    name: str
    path: str
    singular: str
    id_field: str | None = None
    sub_resources: dict[str, str] = field(default_factory=dict)
    listable: bool = True
    gettable: bool = True
    writable: bool = False
    deletable: bool = False
    odata: bool = False
    search_params: tuple[str, ...] = ()
    search_route: bool = False
    sample_template: dict[str, Any] | None = None

    def sub_path(self, sub: str) -> str:
        """
        Get the URL segment of a sub-resource.

        Raises:
            ResourceNotFoundError: If the resource has no such sub-resource
        """
        if sub not in self.sub_resources:
            raise ResourceNotFoundError(
                f"Resource '{self.name}' has no sub-resource '{sub}'. "
                f"Available: {', '.join(sorted(self.sub_resources)) or 'none'}"
            )
        return self.sub_resources[sub]


NOTE_COMMENT_SAMPLE = {
    "COMMENT_ID": 0,
    "BODY": "This is a comment.",
    "OWNER_USER_ID": 1,
    "DATE_CREATED_UTC": "2014-07-15 16:40:00",
    "DATE_UPDATED_UTC": "2014-07-15 16:40:00",
}

TEAM_MEMBER_SAMPLE = {
    "PERMISSION_ID": 1,
    "TEAM_ID": 1,
    "MEMBER_USER_ID": 1,
    "MEMBER_TEAM_ID": 1,
}

_RELATED = {"emails": "Emails", "notes": "Notes", "tasks": "Tasks"}

BUILTIN_RESOURCES = (
    ResourceDefinition(
        name="contacts",
        path="Contacts",
        singular="contact",
        id_field="CONTACT_ID",
        sub_resources={**_RELATED, "files": "FileAttachments"},
        writable=True,
        deletable=True,
        odata=True,
        search_params=("email", "tag"),
        search_route=True,
    ),
    ResourceDefinition(name="countries", path="Countries", singular="country", gettable=False),
    ResourceDefinition(name="currencies", path="Currencies", singular="currency", gettable=False),
    ResourceDefinition(name="custom_fields", path="CustomFields", singular="custom_field"),
    ResourceDefinition(
        name="emails",
        path="Emails",
        singular="email",
        sub_resources={"comments": "Comments"},
        deletable=True,
        odata=True,
    ),
    ResourceDefinition(
        name="events",
        path="Events",
        singular="event",
        id_field="EVENT_ID",
        writable=True,
        deletable=True,
        odata=True,
    ),
    ResourceDefinition(
        name="file_attachments",
        path="FileAttachments",
        singular="file_attachment",
        listable=False,
        gettable=False,
        deletable=True,
    ),
    ResourceDefinition(
        name="file_categories",
        path="FileCategories",
        singular="file_category",
        id_field="CATEGORY_ID",
        writable=True,
        deletable=True,
    ),
    ResourceDefinition(
        name="notes",
        path="Notes",
        singular="note",
        id_field="NOTE_ID",
        sub_resources={"comments": "Comments"},
        writable=True,
        deletable=True,
        odata=True,
    ),
    ResourceDefinition(
        name="note_comments",
        path="Notes",
        singular="note_comment",
        id_field="COMMENT_ID",
        listable=False,
        gettable=False,
        sample_template=NOTE_COMMENT_SAMPLE,
    ),
    ResourceDefinition(
        name="opportunities",
        path="Opportunities",
        singular="opportunity",
        id_field="OPPORTUNITY_ID",
        sub_resources={**_RELATED, "state_history": "StateHistory"},
        writable=True,
        deletable=True,
        odata=True,
    ),
    ResourceDefinition(
        name="opportunity_categories",
        path="OpportunityCategories",
        singular="opportunity_category",
        id_field="CATEGORY_ID",
        writable=True,
        deletable=True,
    ),
    ResourceDefinition(
        name="opportunity_state_reasons",
        path="OpportunityStateReasons",
        singular="opportunity_state_reason",
        gettable=False,
    ),
    ResourceDefinition(
        name="organizations",
        path="Organisations",
        singular="organization",
        id_field="ORGANISATION_ID",
        sub_resources=dict(_RELATED),
        writable=True,
        deletable=True,
        odata=True,
        search_params=("email_domain", "tag"),
        search_route=True,
    ),
    ResourceDefinition(name="pipelines", path="Pipelines", singular="pipeline"),
    ResourceDefinition(name="pipeline_stages", path="PipelineStages", singular="pipeline_stage"),
    ResourceDefinition(
        name="project_categories",
        path="ProjectCategories",
        singular="project_category",
        id_field="CATEGORY_ID",
        writable=True,
        deletable=True,
    ),
    ResourceDefinition(
        name="projects",
        path="Projects",
        singular="project",
        id_field="PROJECT_ID",
        sub_resources=dict(_RELATED),
        writable=True,
        deletable=True,
        odata=True,
        search_params=("tag", "ids"),
    ),
    ResourceDefinition(
        name="relationships", path="Relationships", singular="relationship", gettable=False
    ),
    # Tags are only read per record id, so the single-item getter is get_tags.
    ResourceDefinition(name="tags", path="Tags", singular="tags", listable=False),
    ResourceDefinition(
        name="tasks",
        path="Tasks",
        singular="task",
        id_field="TASK_ID",
        sub_resources={"comments": "Comments"},
        writable=True,
        deletable=True,
        odata=True,
        search_params=("ids",),
    ),
    ResourceDefinition(
        name="teams",
        path="Teams",
        singular="team",
        id_field="TEAM_ID",
        writable=True,
        deletable=True,
        odata=True,
    ),
    ResourceDefinition(
        name="team_members",
        path="TeamMembers",
        singular="team_member",
        listable=False,
        deletable=True,
        sample_template=TEAM_MEMBER_SAMPLE,
    ),
    ResourceDefinition(name="users", path="Users", singular="user"),
)

# In-memory storage for registered resources
_RESOURCES: dict[str, ResourceDefinition] = {}


def register_resource(definition: ResourceDefinition) -> ResourceDefinition:
    """
    Register a resource in the registry.

    Args:
        definition: Resource definition to register

    Returns:
        The registered ResourceDefinition

    Note:
        If the name already exists, it will be overwritten.
    """
    if definition.name in _RESOURCES:
        logger.warning(f"Resource '{definition.name}' already exists. Overwriting.")

    _RESOURCES[definition.name] = definition
    logger.debug(f"Registered resource: {definition.name} ({definition.path})")
    return definition


def get_resource(name: str) -> ResourceDefinition:
    """
    Retrieve a resource from the registry.

    Args:
        name: Resource name (e.g., "contacts")

    Returns:
        The ResourceDefinition for the given name

    Raises:
        ResourceNotFoundError: If the resource is not in the registry
    """
    if name not in _RESOURCES:
        raise ResourceNotFoundError(f"Resource '{name}' not found in registry")

    return _RESOURCES[name]


def list_resources() -> list[ResourceDefinition]:
    """
    List all registered resources.

    Returns:
        List of ResourceDefinition objects sorted by name
    """
    return sorted(_RESOURCES.values(), key=lambda r: r.name)


def reset_registry(include_builtin: bool = True) -> None:
    """
    Clear the registry, optionally restoring the built-in resources.

    This is primarily intended for testing.
    """
    global _RESOURCES
    _RESOURCES = {}
    if include_builtin:
        for definition in BUILTIN_RESOURCES:
            _RESOURCES[definition.name] = definition
    logger.debug("Registry reset")


reset_registry()
