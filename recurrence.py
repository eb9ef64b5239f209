from datetime import timedelta
from typing import List

from models import CadenceKind, GeneratedTask, RecurrenceRule
from utils import DAY_LABELS, format_display_date, sunday_weekday, to_iso_date

ONE_DAY = timedelta(days=1)


def is_ready(rule: RecurrenceRule) -> bool:
    """True when the rule has a name and both dates"""
    return bool(rule.task_name) and rule.start_date is not None and rule.end_date is not None


def make_task(task_name: str, day) -> GeneratedTask:
    return GeneratedTask(
        title=f"{task_name} — {format_display_date(day)}",
        iso_date=to_iso_date(day)
    )


def generate(rule: RecurrenceRule) -> List[GeneratedTask]:
    """
    Expand a recurrence rule into one task per occurrence.

    Returns an empty list while the rule is incomplete or its dates are
    reversed. The end date is included.
    """
    if not is_ready(rule) or rule.start_date > rule.end_date:
        return []

    tasks = []
    current = rule.start_date

    if rule.cadence_kind == CadenceKind.DAILY:
        step = timedelta(days=rule.cadence_value)
        while current <= rule.end_date:
            tasks.append(make_task(rule.task_name, current))
            current += step
        return tasks

    while current <= rule.end_date:
        if rule.cadence_kind == CadenceKind.WEEKLY:
            matches = sunday_weekday(current) in rule.weekday_set
        else:
            # Months shorter than day_of_month are skipped
            matches = current.day == rule.day_of_month
        if matches:
            tasks.append(make_task(rule.task_name, current))
        current += ONE_DAY

    return tasks


def describe_cadence(rule: RecurrenceRule) -> str:
    if rule.cadence_kind == CadenceKind.DAILY:
        return f"every {rule.cadence_value} day(s)"
    if rule.cadence_kind == CadenceKind.WEEKLY:
        days = ", ".join(DAY_LABELS[d] for d in sorted(rule.weekday_set) if 0 <= d <= 6)
        return f"every {days or '—'}"
    return f"on day {rule.day_of_month} of every month"


def describe(rule: RecurrenceRule, tasks: List[GeneratedTask]) -> str:
    """Preview summary shown above the generated task list"""
    if not is_ready(rule):
        return ""
    if rule.start_date > rule.end_date:
        return "⚠️ Invalid dates"
    if not tasks:
        return ""

    return (
        f"📌 {len(tasks)} tasks **{rule.task_name}**\n"
        f"{describe_cadence(rule)}\n"
        f"From {format_display_date(rule.start_date)} to {format_display_date(rule.end_date)}"
    )
