"""Form state for the task generator, kept apart from any rendering."""
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models import (
    CadenceKind,
    FieldMapping,
    GeneratedTask,
    RecurrenceRule,
    RemoteSchema,
    SchemaWriteRequest,
)
from notion_api import build_default_value, first_property
from recurrence import describe, generate
from utils import parse_form_date

LEADING_INT = re.compile(r"\s*[+-]?[0-9]+")


def _positive_int(value: Optional[str], default: int = 1) -> int:
    """Leading integer of a form value ("3.0" is 3), or default when absent or below 1"""
    match = LEADING_INT.match(str(value or ""))
    if match is None:
        return default
    number = int(match.group())
    return number if number >= 1 else default


class ViewState(BaseModel):
    # Recurrence form, raw values as typed by the user
    task_name: str = ""
    start_date: str = ""
    end_date: str = ""
    frequency: str = "1"
    frequency_type: CadenceKind = CadenceKind.DAILY
    selected_days: List[str] = Field(default_factory=list)
    month_day: str = "1"

    # Notion target
    database_id: str = ""
    api_key: str = ""
    notion_schema: Optional[RemoteSchema] = None
    title_prop_key: str = ""
    date_prop_key: str = ""
    defaults: Dict[str, Any] = Field(default_factory=dict)

    def rule(self) -> RecurrenceRule:
        weekdays = set()
        for day in self.selected_days:
            try:
                index = int(day)
            except (TypeError, ValueError):
                continue
            if 0 <= index <= 6:
                weekdays.add(index)

        return RecurrenceRule(
            task_name=self.task_name,
            start_date=parse_form_date(self.start_date),
            end_date=parse_form_date(self.end_date),
            cadence_kind=self.frequency_type,
            cadence_value=_positive_int(self.frequency),
            weekday_set=weekdays,
            day_of_month=min(31, _positive_int(self.month_day))
        )

    def tasks(self) -> List[GeneratedTask]:
        return generate(self.rule())

    def summary(self) -> str:
        if not (self.task_name and self.start_date and self.end_date):
            return ""
        rule = self.rule()
        if rule.start_date is None or rule.end_date is None:
            return "⚠️ Invalid dates"
        return describe(rule, generate(rule))

    def toggle_day(self, day: str) -> "ViewState":
        days = [d for d in self.selected_days if d != day]
        if len(days) == len(self.selected_days):
            days.append(day)
        return self.model_copy(update={"selected_days": days})

    def with_credentials(self, database_id: str, api_key: str) -> "ViewState":
        """New database or key: any fetched schema no longer applies"""
        update = {"database_id": database_id, "api_key": api_key}
        if database_id != self.database_id or api_key != self.api_key:
            update.update(notion_schema=None, title_prop_key="", date_prop_key="", defaults={})
        return self.model_copy(update=update)

    def with_schema(self, schema: RemoteSchema) -> "ViewState":
        return self.model_copy(update={
            "notion_schema": schema,
            "title_prop_key": first_property(schema, "title") or "",
            "date_prop_key": first_property(schema, "date") or "",
            "defaults": {}
        })

    def set_default(self, key: str, raw: Any) -> "ViewState":
        """Store the Notion-shaped default for a property, or drop it when empty"""
        if self.notion_schema is None or key not in self.notion_schema.properties:
            raise KeyError(key)

        prop_type = self.notion_schema.properties[key].type
        value = build_default_value(prop_type, raw)

        defaults = {k: v for k, v in self.defaults.items() if k != key}
        if value is not None:
            defaults[key] = value
        return self.model_copy(update={"defaults": defaults})

    def mapping(self) -> FieldMapping:
        return FieldMapping(
            title_property_key=self.title_prop_key,
            date_property_key=self.date_prop_key or None
        )

    def write_request(self) -> SchemaWriteRequest:
        return SchemaWriteRequest(
            database_id=self.database_id,
            api_key=self.api_key,
            mapping=self.mapping(),
            defaults=dict(self.defaults),
            tasks=self.tasks()
        )
