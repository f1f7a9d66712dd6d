"""
Insightly CRM client.

Generic operations (list_records, get_record, save_record, delete_record,
list_related, sample) are driven by the resource registry. Per-resource
convenience methods such as get_contacts or add_event are generated from the
same registry when this module is imported.
"""

import copy
import dataclasses
import logging
from typing import Any, Mapping

import httpx

from ..core.models import (
    ODATA_KEYS,
    ClientConfig,
    ConfigError,
    FileError,
    QueryOptions,
    SampleRequest,
)
from ..core.multipart import upload_fields
from ..core.registry import ResourceDefinition, get_resource, list_resources
from .request import OutboundRequest, decode_json, new_request, send

logger = logging.getLogger(__name__)


def record_id(record: Any, id_field: str | None) -> Any:
    """Read the identifier field from a dict or attribute-style record."""
    if not id_field:
        return None
    if isinstance(record, Mapping):
        return record.get(id_field)
    return getattr(record, id_field, None)


def is_existing_record(record: Any, id_field: str | None) -> bool:
    """
    Decide whether a record refers to an existing item.

    Only a strictly positive identifier counts; a missing, zero, negative or
    non-numeric identifier means the record is new.
    """
    value = record_id(record, id_field)
    if value is None or isinstance(value, bool):
        return False
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def is_numeric(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def join_ids(ids: Any) -> str:
    """Join a sequence of ids with commas; strings pass through unchanged."""
    if isinstance(ids, (str, int)):
        return str(ids)
    return ",".join(str(i) for i in ids)


class InsightlyClient:
    """
    Client for the Insightly REST API.

    Features:
    - Table-driven endpoint routing from the resource registry
    - Basic authentication from an immutable ClientConfig
    - OData paging, ordering and filtering for list operations
    - Create-or-update dispatch on the record's identifier field
    - Multipart file attachment uploads
    """

    def __init__(
        self,
        config: ClientConfig,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection settings and API key
            http_client: Optional httpx client (created if None)
        """
        self.config = config

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.Client(timeout=config.timeout_seconds)
        else:
            self.http_client = http_client

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ===== REQUEST PLUMBING =====

    def _request(self, method: str, path: str) -> OutboundRequest:
        return new_request(self.config, method, path)

    def _execute_json(self, request: OutboundRequest) -> Any:
        return decode_json(send(self.http_client, self.config, request))

    def _execute_raw(self, request: OutboundRequest) -> bytes:
        return send(self.http_client, self.config, request).content

    def _write(self, path: str, record: Any, id_field: str | None) -> Any:
        method = "PUT" if is_existing_record(record, id_field) else "POST"
        logger.info(f"{'Updating' if method == 'PUT' else 'Creating'} record at {path}")
        return self._execute_json(self._request(method, path).json_body(record))

    @staticmethod
    def _require(definition: ResourceDefinition, flag: str, operation: str) -> None:
        if not getattr(definition, flag):
            raise ConfigError(
                f"Resource '{definition.name}' does not support {operation}"
            )

    # ===== GENERIC OPERATIONS =====

    def list_records(
        self,
        resource: str,
        options: QueryOptions | Mapping[str, Any] | None = None,
        **params: Any,
    ) -> Any:
        """
        List records of a resource.

        OData options and resource-specific search parameters may be given as
        a dict, a QueryOptions instance and/or keyword arguments.

        Args:
            resource: Resource name (e.g., "contacts")
            options: Paging/ordering/filter options and search parameters
            **params: Additional options or search parameters

        Returns:
            Decoded JSON list

        Raises:
            ConfigError: If the resource cannot be listed or a parameter is unsupported
        """
        definition = get_resource(resource)
        self._require(definition, "listable", "listing")

        merged: dict[str, Any] = {}
        if isinstance(options, QueryOptions):
            query = options
        else:
            merged.update(options or {})
            query = QueryOptions()
        merged.update(params)

        odata_values = {key: merged.pop(key) for key in ODATA_KEYS if key in merged}
        if odata_values:
            if isinstance(odata_values.get("filters"), str):
                odata_values["filters"] = [odata_values["filters"]]
            query = dataclasses.replace(query, **odata_values)

        unknown = set(merged) - set(definition.search_params)
        if unknown:
            raise ConfigError(
                f"Unsupported parameter(s) for '{resource}': {', '.join(sorted(unknown))}"
            )
        if not query.is_empty() and not definition.odata:
            raise ConfigError(f"Resource '{resource}' does not accept OData options")

        search = [
            (name, merged[name])
            for name in definition.search_params
            if merged.get(name) not in (None, "", [], ())
        ]

        path = definition.path
        if definition.search_route and search:
            path += "/Search"

        request = self._request("GET", path).odata(query)
        for name, value in search:
            if name == "ids":
                value = join_ids(value)
            request.query_param(name, value)

        return self._execute_json(request)

    def get_record(self, resource: str, item_id: Any) -> Any:
        """Get a single record by ID."""
        definition = get_resource(resource)
        self._require(definition, "gettable", "single-item reads")
        return self._execute_json(self._request("GET", f"{definition.path}/{item_id}"))

    def save_record(self, resource: str, record: Any) -> Any:
        """
        Create or update a record.

        A strictly positive identifier field updates (PUT), anything else
        creates (POST). Passing SAMPLE returns a sample record instead.

        Returns:
            The record as stored on the server
        """
        definition = get_resource(resource)
        if isinstance(record, SampleRequest):
            return self.sample(resource)
        self._require(definition, "writable", "writes")
        return self._write(definition.path, record, definition.id_field)

    def delete_record(self, resource: str, item_id: Any) -> bool:
        """Delete a record by ID; returns True on success."""
        definition = get_resource(resource)
        self._require(definition, "deletable", "deletes")
        logger.info(f"Deleting {definition.path}/{item_id}")
        self._execute_raw(self._request("DELETE", f"{definition.path}/{item_id}"))
        return True

    def list_related(self, resource: str, item_id: Any, sub: str) -> Any:
        """List a sub-resource of a record, e.g. the emails of a contact."""
        definition = get_resource(resource)
        sub_path = definition.sub_path(sub)
        return self._execute_json(
            self._request("GET", f"{definition.path}/{item_id}/{sub_path}")
        )

    def sample(self, resource: str) -> Any:
        """
        Return a sample record showing the fields a resource uses.

        Resources with a static template return a copy of it. Others return
        the first record of their listing, or None when there is none.
        """
        definition = get_resource(resource)
        if definition.sample_template is not None:
            return copy.deepcopy(definition.sample_template)
        self._require(definition, "listable", "samples")

        options = {"top": 1} if definition.odata else None
        records = self.list_records(resource, options)
        if not records:
            return None
        return records[0]

    # ===== CONTACTS =====

    def add_contact_note(self, contact_id: Any, note: Any) -> Any:
        """Create or update a note attached to a contact."""
        return self._write(f"Contacts/{contact_id}/Notes", note, "NOTE_ID")

    def add_file_to_contact(
        self,
        contact_id: Any,
        file: str,
        filename: str,
        file_category_id: Any = None,
    ) -> Any:
        """
        Upload a file attachment to a contact.

        Args:
            contact_id: Contact identifier
            file: Path of the file to upload
            filename: Filename to store the attachment under
            file_category_id: Optional numeric file category

        Returns:
            The created file attachment record
        """
        extra = {}
        if is_numeric(file_category_id):
            extra["file_category_id"] = file_category_id
        fields = upload_fields("file", file, filename, **extra)

        logger.info(f"Uploading {file} to contact {contact_id}")
        request = self._request("POST", f"Contacts/{contact_id}/FileAttachments")
        return self._execute_json(request.upload_body(fields))

    # ===== FILE ATTACHMENTS =====

    def get_file(self, file_id: Any, output_filename: str | None = None) -> bytes | int:
        """
        Download a file attachment.

        Args:
            file_id: File attachment identifier
            output_filename: Optional path to write the file to

        Returns:
            The raw file bytes, or the number of bytes written when
            output_filename is given

        Raises:
            FileError: If the output file cannot be written
        """
        content = self._execute_raw(self._request("GET", f"FileAttachments/{file_id}"))
        if not output_filename:
            return content

        try:
            with open(output_filename, "wb") as f:
                written = f.write(content)
        except OSError as e:
            raise FileError(f"Failed to write {output_filename}: {e}") from e
        logger.info(f"Saved file attachment {file_id} to {output_filename}")
        return written

    # ===== COMMENTS =====

    def add_comment_to_email(self, email_id: Any, body: str, owner_user_id: Any) -> Any:
        data = {"BODY": body, "OWNER_USER_ID": owner_user_id}
        request = self._request("POST", f"Emails/{email_id}/Comments").json_body(data)
        return self._execute_json(request)

    def add_note_comment(self, note_id: Any, comment: Any) -> Any:
        """Add a comment to a note. Passing SAMPLE returns a template comment."""
        if isinstance(comment, SampleRequest):
            return self.sample("note_comments")
        request = self._request("POST", f"Notes/{note_id}/Comments").json_body(comment)
        return self._execute_json(request)

    def add_task_comment(self, task_id: Any, comment: Any) -> Any:
        request = self._request("POST", f"Tasks/{task_id}/Comments").json_body(comment)
        return self._execute_json(request)

    # ===== TEAM MEMBERS =====

    def get_team_members(self, team_id: Any) -> Any:
        request = self._request("GET", "TeamMembers").query_param("teamid", team_id)
        return self._execute_json(request)

    def add_team_member(self, team_member: Any) -> Any:
        """Add a member to a team. Passing SAMPLE returns a template member."""
        if isinstance(team_member, SampleRequest):
            return self.sample("team_members")
        request = self._request("POST", "TeamMembers").json_body(team_member)
        return self._execute_json(request)

    def update_team_member(self, team_member: Any) -> Any:
        request = self._request("PUT", "TeamMembers").json_body(team_member)
        return self._execute_json(request)


def _describe(definition: ResourceDefinition) -> str:
    return definition.name.replace("_", " ")


def _list_method(definition: ResourceDefinition):
    def method(self, options=None, **params):
        return self.list_records(definition.name, options, **params)

    method.__doc__ = f"List {_describe(definition)} (GET /{definition.path})."
    return f"get_{definition.name}", method


def _get_method(definition: ResourceDefinition):
    def method(self, item_id):
        return self.get_record(definition.name, item_id)

    method.__doc__ = f"Get one of the {_describe(definition)} by ID."
    return f"get_{definition.singular}", method


def _add_method(definition: ResourceDefinition):
    def method(self, record):
        return self.save_record(definition.name, record)

    method.__doc__ = (
        f"Create or update one of the {_describe(definition)}, "
        f"keyed on {definition.id_field}."
    )
    return f"add_{definition.singular}", method


def _delete_method(definition: ResourceDefinition):
    def method(self, item_id):
        return self.delete_record(definition.name, item_id)

    method.__doc__ = f"Delete one of the {_describe(definition)} by ID."
    return f"delete_{definition.singular}", method


def _sample_method(definition: ResourceDefinition):
    def method(self):
        return self.sample(definition.name)

    method.__doc__ = f"Return a sample record of {_describe(definition)}."
    return f"sample_{definition.singular}", method


def _related_method(definition: ResourceDefinition, sub: str):
    def method(self, item_id):
        return self.list_related(definition.name, item_id, sub)

    method.__doc__ = f"List the {sub.replace('_', ' ')} of one of the {_describe(definition)}."
    return f"get_{definition.singular}_{sub}", method


def resource_methods(definition: ResourceDefinition) -> list:
    """Build the (name, function) pairs a resource contributes to the client."""
    methods = []
    if definition.listable:
        methods.append(_list_method(definition))
    if definition.gettable:
        methods.append(_get_method(definition))
    if definition.writable:
        methods.append(_add_method(definition))
    if definition.deletable:
        methods.append(_delete_method(definition))
    if definition.writable or definition.sample_template is not None:
        methods.append(_sample_method(definition))
    for sub in definition.sub_resources:
        methods.append(_related_method(definition, sub))
    return methods


def install_resource_methods(cls: type) -> type:
    """
    Attach generated per-resource methods to a client class.

    Methods already defined on the class are left untouched.
    """
    for definition in list_resources():
        for name, method in resource_methods(definition):
            if name in cls.__dict__:
                continue
            method.__name__ = name
            method.__qualname__ = f"{cls.__name__}.{name}"
            setattr(cls, name, method)
    return cls


install_resource_methods(InsightlyClient)
