from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


class CadenceKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecurrenceRule(BaseModel):
    task_name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cadence_kind: CadenceKind = CadenceKind.DAILY
    cadence_value: int = Field(default=1, ge=1, description="Step in days for daily cadence")
    weekday_set: Set[int] = Field(
        default_factory=set,
        description="Weekday indices, 0=Sunday ... 6=Saturday"
    )
    day_of_month: int = Field(default=1, ge=1, le=31)


class GeneratedTask(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(description="Format: '<task name> — dd/mm/yyyy'")
    iso_date: Optional[str] = Field(default=None, alias="dateISO", description="Format: 'YYYY-MM-DD'")


class PropertyOption(BaseModel):
    id: Optional[str] = None
    name: str
    color: Optional[str] = None


class SchemaProperty(BaseModel):
    id: Optional[str] = None
    name: str
    type: str
    options: Optional[List[PropertyOption]] = None


class RemoteSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    database_id: str = Field(alias="databaseId")
    properties: Dict[str, SchemaProperty] = Field(default_factory=dict)


class FieldMapping(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title_property_key: str = Field(default="", alias="titlePropKey")
    date_property_key: Optional[str] = Field(default=None, alias="datePropKey")


class NotionCredentials(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    database_id: str = Field(default="", alias="databaseId")
    api_key: str = Field(default="", alias="apiKey")


class SchemaRequest(NotionCredentials):
    pass


class SchemaWriteRequest(NotionCredentials):
    mapping: FieldMapping = Field(default_factory=FieldMapping, alias="schema")
    defaults: Dict[str, Any] = Field(default_factory=dict)
    tasks: Optional[List[GeneratedTask]] = None


class LegacyWriteRequest(NotionCredentials):
    tasks: Optional[List[str]] = None


class WriteResult(BaseModel):
    success: bool = True
    message: str
    created: int
