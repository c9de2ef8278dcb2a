"""
Calendar export for task deadlines.

Produces RFC 5545 iCalendar text (all-day events on the deadline) and
deep links that open a pre-filled event in Google Calendar or Outlook.com.
Tasks without a deadline are skipped.
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from .models.task import Task, TaskPriority

CRLF = '\r\n'
PRODID = '-//Meeting Task Tool//Task Export//EN'
CALENDAR_NAME = 'Meeting Task Tool - Tasks'
UID_DOMAIN = 'meeting-task-tool'

GOOGLE_CALENDAR_URL = 'https://calendar.google.com/calendar/render'
OUTLOOK_CALENDAR_URL = 'https://outlook.live.com/calendar/0/deeplink/compose'


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_date(value: datetime) -> str:
    return _utc(value).strftime('%Y%m%d')


def _format_datetime(value: datetime) -> str:
    return _utc(value).strftime('%Y%m%dT%H%M%SZ')


def escape_text(text: str) -> str:
    """Escape an iCalendar TEXT value (backslash, semicolon, comma, newline)."""
    return (
        text.replace('\\', '\\\\')
        .replace(';', '\\;')
        .replace(',', '\\,')
        .replace('\r\n', '\\n')
        .replace('\n', '\\n')
    )


def _assignee_text(task: Task) -> str:
    return ', '.join(task.assignee_names) or 'Unassigned'


def _details(task: Task) -> str:
    return (
        f'Priority: {task.priority.value}\n'
        f'Status: {task.status.value}\n'
        f'Assignee: {_assignee_text(task)}'
    )


def generate_ics_event(task: Task, now: datetime | None = None) -> str:
    """
    Build one VEVENT for a task.

    Args:
        task: Task to export
        now: DTSTAMP value (defaults to current UTC time)

    Returns:
        VEVENT block, or an empty string when the task has no deadline
    """
    if task.deadline is None:
        return ''

    now = now or datetime.now(timezone.utc)
    description = _details(task)
    if task.meeting and task.meeting.title:
        description += f'\nFrom meeting: {task.meeting.title}'

    high = task.priority in (TaskPriority.HIGH, TaskPriority.URGENT)
    lines = [
        'BEGIN:VEVENT',
        f'UID:task-{task.id}@{UID_DOMAIN}',
        f'DTSTAMP:{_format_datetime(now)}',
        f'DTSTART;VALUE=DATE:{_format_date(task.deadline)}',
        f'DTEND;VALUE=DATE:{_format_date(_utc(task.deadline) + timedelta(days=1))}',
        f'SUMMARY:{escape_text(task.description)}',
        f'DESCRIPTION:{escape_text(description)}',
    ]
    if task.created_at:
        lines.append(f'CREATED:{_format_datetime(task.created_at)}')
    lines.append('PRIORITY:1' if high else 'PRIORITY:5')
    lines.append('END:VEVENT')
    return CRLF.join(lines)


def generate_ics_calendar(tasks: list[Task], now: datetime | None = None) -> str:
    """Build a VCALENDAR holding one event per task with a deadline."""
    events = [generate_ics_event(t, now) for t in tasks if t.deadline is not None]
    lines = [
        'BEGIN:VCALENDAR',
        'VERSION:2.0',
        f'PRODID:{PRODID}',
        'CALSCALE:GREGORIAN',
        'METHOD:PUBLISH',
        f'X-WR-CALNAME:{CALENDAR_NAME}',
        *events,
        'END:VCALENDAR',
    ]
    return CRLF.join(lines)


def google_calendar_url(task: Task) -> str | None:
    """Google Calendar 'add event' link for the task's deadline day."""
    if task.deadline is None:
        return None
    next_day = _utc(task.deadline) + timedelta(days=1)
    params = {
        'action': 'TEMPLATE',
        'text': task.description,
        'dates': f'{_format_date(task.deadline)}/{_format_date(next_day)}',
        'details': _details(task),
    }
    return f'{GOOGLE_CALENDAR_URL}?{urlencode(params)}'


def outlook_calendar_url(task: Task) -> str | None:
    """Outlook.com compose link for an all-day event on the deadline."""
    if task.deadline is None:
        return None
    deadline = _utc(task.deadline)
    next_day = deadline + timedelta(days=1)
    params = {
        'path': '/calendar/action/compose',
        'rru': 'addevent',
        'subject': task.description,
        'startdt': deadline.strftime('%Y-%m-%d'),
        'enddt': next_day.strftime('%Y-%m-%d'),
        'allday': 'true',
        'body': _details(task),
    }
    return f'{OUTLOOK_CALENDAR_URL}?{urlencode(params)}'
