from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from exceptions import (
    NoDateFieldError,
    NoTitleFieldError,
    PageWriteError,
    SchemaReadError,
    UnsupportedPropertyError,
)
from models import FieldMapping, GeneratedTask, RemoteSchema, SchemaProperty
from utils import parse_display_date, parse_form_date, to_iso_date

DEFAULT_NOTION_VERSION = "2022-06-28"

# Legacy path only accepts title properties with one of these keys (case-insensitive)
LEGACY_TITLE_NAMES = ("taches", "tâches", "tache", "tâche", "nom", "name")
LEGACY_DATE_NAME = "date"
LEGACY_SEPARATOR = " — "

CHOICE_TYPES = ("select", "multi_select", "status")
NOTION_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.HTTPError)


class NotionGateway(Protocol):
    """The two Notion operations the task senders depend on"""

    async def read_schema(self, database_id: str, credential: str) -> RemoteSchema: ...

    async def create_page(self, database_id: str, credential: str,
                          properties: Dict[str, Any]) -> Dict[str, Any]: ...


def error_details(error: Exception) -> str:
    """Remote error body when Notion answered, otherwise the transport message"""
    body = getattr(error, "body", None)
    return body if body else str(error)


def schema_from_database(database_id: str, database: Dict[str, Any]) -> RemoteSchema:
    """Convert a Notion 'retrieve database' response into a RemoteSchema"""
    properties = {}
    for key, prop in database.get("properties", {}).items():
        prop_type = prop.get("type", "")
        options = None
        if prop_type in CHOICE_TYPES:
            options = (prop.get(prop_type) or {}).get("options", [])
        properties[key] = SchemaProperty(
            id=prop.get("id"),
            name=prop.get("name", key),
            type=prop_type,
            options=options
        )
    return RemoteSchema(database_id=database_id, properties=properties)


class NotionClientGateway:
    """NotionGateway backed by notion_client; one client per call, credentials never kept"""

    def __init__(self, notion_version: str = DEFAULT_NOTION_VERSION):
        self.notion_version = notion_version

    def _client(self, credential: str) -> AsyncClient:
        # One attempt per request, a failed write aborts the batch
        return AsyncClient(auth=credential, notion_version=self.notion_version, retry=False)

    async def read_schema(self, database_id: str, credential: str) -> RemoteSchema:
        try:
            async with self._client(credential) as notion:
                database = await notion.databases.retrieve(database_id=database_id)
        except NOTION_ERRORS as e:
            raise SchemaReadError("❌ Unable to read the Notion database", error_details(e)) from e
        return schema_from_database(database_id, database)

    async def create_page(self, database_id: str, credential: str,
                          properties: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with self._client(credential) as notion:
                return await notion.pages.create(
                    parent={"database_id": database_id},
                    properties=properties
                )
        except NOTION_ERRORS as e:
            raise PageWriteError("❌ Error sending to Notion", error_details(e)) from e


def first_property(schema: RemoteSchema, prop_type: str, names: Optional[Tuple[str, ...]] = None):
    """Key of the first property of the given type, optionally restricted to allowed names"""
    for key, prop in schema.properties.items():
        if prop.type != prop_type:
            continue
        if names is None or key.lower() in names:
            return key
    return None


def resolve_mapping(schema: RemoteSchema) -> FieldMapping:
    """Pick the first title property and the first date property, if any"""
    title_key = first_property(schema, "title")
    if not title_key:
        raise NoTitleFieldError("❌ No Title field found in the database.")
    return FieldMapping(
        title_property_key=title_key,
        date_property_key=first_property(schema, "date")
    )


def resolve_legacy_mapping(schema: RemoteSchema) -> FieldMapping:
    """Allow-listed discovery used by the plain-text submission"""
    title_key = first_property(schema, "title", LEGACY_TITLE_NAMES)
    if not title_key:
        raise NoTitleFieldError("❌ No Title field found (taches/tâche/nom/name).")

    date_key = first_property(schema, "date", (LEGACY_DATE_NAME,))
    if not date_key:
        raise NoDateFieldError("❌ No 'Date' field (date type) found in the database.")

    return FieldMapping(title_property_key=title_key, date_property_key=date_key)


def validate_mapping(schema: RemoteSchema, mapping: FieldMapping) -> FieldMapping:
    """Check a user-chosen mapping against the schema; no title key means the first title property"""
    title_key = mapping.title_property_key
    if not title_key:
        title_key = resolve_mapping(schema).title_property_key
    else:
        prop = schema.properties.get(title_key)
        if prop is None or prop.type != "title":
            raise NoTitleFieldError(f"❌ '{title_key}' is not a Title field of the database.")

    date_key = mapping.date_property_key or None
    if date_key is not None:
        prop = schema.properties.get(date_key)
        if prop is None or prop.type != "date":
            raise NoDateFieldError(f"❌ '{date_key}' is not a Date field of the database.")

    return FieldMapping(title_property_key=title_key, date_property_key=date_key)


def title_value(text: str) -> Dict[str, Any]:
    return {"title": [{"text": {"content": text}}]}


def date_value(iso_date: str) -> Dict[str, Any]:
    return {"date": {"start": iso_date}}


def build_properties(task: GeneratedTask, mapping: FieldMapping,
                     defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Page properties for one task: defaults, then title, then date when known"""
    reserved = {mapping.title_property_key, mapping.date_property_key}
    properties = {
        key: value for key, value in (defaults or {}).items() if key not in reserved
    }

    properties[mapping.title_property_key] = title_value(task.title)

    day = parse_form_date(task.iso_date)
    if mapping.date_property_key and day is not None:
        properties[mapping.date_property_key] = date_value(to_iso_date(day))

    return properties


def parse_legacy_task(text: str) -> Tuple[str, Optional[str]]:
    """Split '<title> — dd/mm/yyyy' into the title and an ISO date (None if unusable)"""
    parts = str(text).split(LEGACY_SEPARATOR)
    title = parts[0].strip()
    date_part = parts[1].strip() if len(parts) > 1 else ""
    return title, parse_display_date(date_part)


def _text_list(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(item).strip() for item in raw if str(item).strip()]


def build_default_value(prop_type: str, raw: Any) -> Optional[Dict[str, Any]]:
    """
    Shape a raw form value into the Notion value for a property type.

    Returns None when the raw value is empty, meaning no default is applied.
    """
    if raw is None or (isinstance(raw, (str, list)) and not raw):
        return None

    if prop_type == "checkbox":
        if isinstance(raw, str):
            return {"checkbox": raw.strip().lower() in ("true", "1", "yes", "on")}
        return {"checkbox": bool(raw)}

    if prop_type == "number":
        try:
            number = float(raw)
        except (TypeError, ValueError):
            raise UnsupportedPropertyError(f"❌ '{raw}' is not a number.")
        return {"number": int(number) if number.is_integer() else number}

    if prop_type == "rich_text":
        return {"rich_text": [{"text": {"content": str(raw)}}]}

    if prop_type in ("select", "status"):
        return {prop_type: {"name": str(raw).strip()}}

    if prop_type == "multi_select":
        names = _text_list(raw)
        return {"multi_select": [{"name": name} for name in names]} if names else None

    if prop_type in ("url", "email", "phone_number"):
        return {prop_type: str(raw).strip()}

    raise UnsupportedPropertyError(f"❌ Default values are not supported for '{prop_type}' fields.")
