"""
Batch senders: one Notion page per task, created sequentially.

Both submission protocols share the same flow: read the database schema
once, build every page payload, then create the pages one at a time. The
first failed write aborts the batch; pages already created stay in Notion.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from models import FieldMapping, GeneratedTask, RemoteSchema
from notion_api import (
    NotionGateway,
    build_properties,
    parse_legacy_task,
    resolve_legacy_mapping,
    validate_mapping,
)


class TaskSender(ABC):

    def __init__(self, tasks: List[Any]):
        self.tasks = tasks

    @abstractmethod
    def build_pages(self, schema: RemoteSchema) -> List[Dict[str, Any]]:
        """Page properties for every task, in sending order"""

    async def send(self, gateway: NotionGateway, database_id: str, credential: str) -> int:
        """Create all pages, returning how many were created"""
        schema = await gateway.read_schema(database_id, credential)
        pages = self.build_pages(schema)

        for properties in pages:
            await gateway.create_page(database_id, credential, properties)

        return len(pages)


class SchemaTaskSender(TaskSender):
    """Generated tasks written through a mapping chosen from the schema"""

    def __init__(self, mapping: FieldMapping, tasks: List[GeneratedTask],
                 defaults: Optional[Dict[str, Any]] = None):
        super().__init__(tasks)
        self.mapping = mapping
        self.defaults = defaults or {}

    def build_pages(self, schema: RemoteSchema) -> List[Dict[str, Any]]:
        mapping = validate_mapping(schema, self.mapping)
        return [build_properties(task, mapping, self.defaults) for task in self.tasks]


class LegacyTaskSender(TaskSender):
    """Plain-text tasks of the form '<title> — dd/mm/yyyy'"""

    def build_pages(self, schema: RemoteSchema) -> List[Dict[str, Any]]:
        mapping = resolve_legacy_mapping(schema)
        pages = []
        for text in self.tasks:
            title, iso_date = parse_legacy_task(text)
            task = GeneratedTask(title=title, iso_date=iso_date)
            pages.append(build_properties(task, mapping))
        return pages
