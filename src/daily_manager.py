#!/usr/bin/env python3
"""
DailyManager

Personal day planner that:
1. Records tasks for a day with an estimated duration
2. Moves tasks through pending -> started -> done/cancelled
3. Settles elapsed wall-clock time into each task's actual minutes
4. Reports planned/worked/achieved progress against the daily work budget
5. Keeps free-text notes per day
"""

import os
import sys
import copy
import yaml
import logging
import shlex
import subprocess
import tempfile
from enum import Enum
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple, Union
from datetime import date, datetime, time, timedelta
from dataclasses import dataclass

from storage import NoteStore, StoreError, TaskStore


DATE_FORMAT = '%Y-%m-%d'
DEFAULT_CONFIG_PATH = Path('~/.config/daily/config.yaml')

DEFAULT_CONFIG: Dict[str, Any] = {
    'storage': {
        'data_dir': '~/.daily',
        'tasks_file': 'tasks.yaml',
        'notes_file': 'notes.yaml',
    },
    'workday': {
        'start': '08:30',
        'lunch_start': '12:30',
        'lunch_end': '13:30',
        'end': '17:30',
        'daily_capacity_minutes': 480,
    },
    'notes': {
        'editor': None,
    },
    'logging': {
        'level': 'WARNING',
    },
}


class TaskStatus(str, Enum):
    """Canonical task states"""
    PENDING = 'pending'
    STARTED = 'started'
    DONE = 'done'
    CANCELLED = 'cancelled'


# Leaving `started` for one of these settles the running timer first
SETTLING_STATUSES = (TaskStatus.PENDING.value, TaskStatus.DONE.value, TaskStatus.CANCELLED.value)
CLOSED_STATUSES = (TaskStatus.DONE.value, TaskStatus.CANCELLED.value)


# ==================== Errors ====================

class DailyError(Exception):
    """Base class for planner errors reported to the user"""


class ValidationError(DailyError, ValueError):
    """Bad user input (empty title, non-positive estimate, ...)"""


class TaskIndexError(DailyError, IndexError):
    """Task index out of range for the addressed day"""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Invalid task index (day has {count} tasks)")


class AlreadyRunningNotice(DailyError):
    """
    Policy refusal: another task of the day is already started

    Not a failure. Callers report it to the user and leave state untouched.
    """

    def __init__(self, index: int, title: str):
        self.index = index
        self.title = title
        super().__init__(
            f"A task is already started ('{title}'). "
            "Please finish it before starting another one."
        )


# ==================== Data Model ====================

@dataclass
class Task:
    """A unit of work scheduled for one day"""
    title: str
    estimated: int  # minutes
    actual: int = 0  # minutes
    status: str = TaskStatus.PENDING.value
    started_at: int = 0  # unix epoch seconds, 0 when not running

    @property
    def is_running(self) -> bool:
        return self.status == TaskStatus.STARTED.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'estimated': self.estimated,
            'actual': self.actual,
            'status': self.status,
            'started_at': self.started_at,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'Task':
        return cls(
            title=record['title'],
            estimated=record['estimated'],
            actual=record.get('actual', 0),
            status=record.get('status', TaskStatus.PENDING.value),
            started_at=record.get('started_at', 0),
        )


@dataclass
class Workday:
    """Fixed work calendar for a local day"""
    start: time = time(8, 30)
    lunch_start: time = time(12, 30)
    lunch_end: time = time(13, 30)
    end: time = time(17, 30)
    capacity: int = 480  # minutes of planned work per day

    def __post_init__(self):
        if not (self.start <= self.lunch_start <= self.lunch_end <= self.end):
            raise ValidationError(
                f"Workday times must be ordered start <= lunch_start <= lunch_end <= end, "
                f"got {self.start}, {self.lunch_start}, {self.lunch_end}, {self.end}"
            )
        if self.capacity <= 0:
            raise ValidationError(f"Daily capacity must be positive, got {self.capacity}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Workday':
        """Build from the `workday` config section"""
        capacity = config.get('daily_capacity_minutes', 480)
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValidationError(f"daily_capacity_minutes must be an integer, got {capacity!r}")
        return cls(
            start=parse_clock(config.get('start', '08:30')),
            lunch_start=parse_clock(config.get('lunch_start', '12:30')),
            lunch_end=parse_clock(config.get('lunch_end', '13:30')),
            end=parse_clock(config.get('end', '17:30')),
            capacity=capacity,
        )

    @property
    def morning_minutes(self) -> int:
        return _minutes_between(self.start, self.lunch_start)

    @property
    def afternoon_minutes(self) -> int:
        return _minutes_between(self.lunch_end, self.end)

    def remaining_minutes(self, now: datetime) -> int:
        """
        Work-minutes left in the calendar day of `now`

        Before the day starts the whole day is available; during lunch only
        the afternoon session is left; after the end of day nothing is.
        Partial minutes are dropped.
        """
        day = now.date()
        work_start = datetime.combine(day, self.start)
        lunch_start = datetime.combine(day, self.lunch_start)
        lunch_end = datetime.combine(day, self.lunch_end)
        work_end = datetime.combine(day, self.end)

        if now < work_start:
            return self.morning_minutes + self.afternoon_minutes
        if now > work_end:
            return 0

        if now < lunch_start:
            return _floor_minutes(lunch_start - now) + self.afternoon_minutes
        if now < lunch_end:
            return self.afternoon_minutes
        return _floor_minutes(work_end - now)


@dataclass
class DayMetrics:
    """Aggregate progress numbers for one day's tasks"""
    total_estimated: int
    total_actual: int
    achieved_work: int
    remaining_work: int
    remaining_minutes: int
    workload_ratio: float
    capacity: int = 480

    @property
    def planned_ratio(self) -> float:
        return self.total_estimated / self.capacity

    @property
    def worked_ratio(self) -> float:
        return self.total_actual / self.capacity

    @property
    def achieved_ratio(self) -> float:
        if self.total_estimated == 0:
            return 0.0
        return self.achieved_work / self.total_estimated

    @property
    def over_capacity(self) -> bool:
        return self.total_estimated > self.capacity


# ==================== Time Helpers ====================

def parse_clock(value: Union[str, int, time]) -> time:
    """
    Parse a HH:MM wall-clock value from config

    Unquoted `12:30` is read by YAML 1.1 as the base-60 integer 750, which is
    exactly minutes since midnight, so integers are accepted as such.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value < 24 * 60:
            raise ValidationError(f"Clock value out of range: {value}")
        return time(value // 60, value % 60)
    try:
        return datetime.strptime(str(value).strip(), '%H:%M').time()
    except ValueError as e:
        raise ValidationError(f"Invalid clock value {value!r}, expected HH:MM") from e


def day_key(day: Union[date, datetime]) -> str:
    """Bucket key (YYYY-MM-DD) for a local date"""
    return day.strftime(DATE_FORMAT)


def parse_day(value: str) -> str:
    """Validate a YYYY-MM-DD argument and return it as a bucket key"""
    try:
        return day_key(datetime.strptime(value, DATE_FORMAT))
    except ValueError as e:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def to_epoch(now: datetime) -> int:
    return int(now.timestamp())


def _floor_minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)


def _minutes_between(start: time, end: time) -> int:
    anchor = date(2000, 1, 1)
    return _floor_minutes(datetime.combine(anchor, end) - datetime.combine(anchor, start))


def _minutes_since(epoch: int, now: datetime) -> int:
    # Clock moved backwards: count nothing rather than shrink `actual`
    return max(0, (to_epoch(now) - epoch) // 60)


# ==================== Lifecycle Engine ====================

def _status_value(status: Union[TaskStatus, str]) -> str:
    if isinstance(status, TaskStatus):
        return status.value
    return str(status)


def _check_index(tasks: List[Task], index: int) -> Task:
    if not 0 <= index < len(tasks):
        raise TaskIndexError(index, len(tasks))
    return tasks[index]


def elapsed_minutes(task: Task, now: datetime) -> int:
    """Whole minutes the task has been running; 0 unless it is started"""
    if not task.is_running or not task.started_at:
        return 0
    return _minutes_since(task.started_at, now)


def settle(task: Task, now: datetime) -> int:
    """
    Fold the running span into `actual` and clear the timer

    Only the first call per started span adds time; afterwards `started_at`
    is 0 and further calls are no-ops.

    Returns:
        Minutes added to `actual`
    """
    if not task.started_at:
        return 0
    minutes = _minutes_since(task.started_at, now)
    task.actual += minutes
    task.started_at = 0
    return minutes


def find_started(tasks: List[Task]) -> Optional[Tuple[int, Task]]:
    """Index and task of the day's running task, if any"""
    for i, task in enumerate(tasks):
        if task.is_running:
            return i, task
    return None


def next_pending(tasks: List[Task], skip: int = 0) -> Optional[Tuple[int, Task]]:
    """
    First pending task in display order, after skipping `skip` candidates

    Raises:
        AlreadyRunningNotice: a task is already started
    """
    running = find_started(tasks)
    if running is not None:
        raise AlreadyRunningNotice(running[0], running[1].title)

    for i, task in enumerate(tasks):
        if task.status == TaskStatus.PENDING.value:
            if skip > 0:
                skip -= 1
                continue
            return i, task
    return None


def apply_transition(tasks: List[Task], index: int, status: Union[TaskStatus, str], now: datetime) -> Task:
    """
    Move tasks[index] to `status`, settling time when it leaves `started`

    Unrecognized status strings are stored verbatim without touching the
    timer.

    Raises:
        TaskIndexError: index out of range
        AlreadyRunningNotice: starting while another task is started
    """
    task = _check_index(tasks, index)
    value = _status_value(status)

    if value == TaskStatus.STARTED.value:
        running = find_started(tasks)
        if running is not None and running[0] != index:
            raise AlreadyRunningNotice(running[0], running[1].title)
        task.started_at = to_epoch(now)
        task.status = value
    elif value in SETTLING_STATUSES:
        settle(task, now)
        task.status = value
    else:
        task.status = value

    return task


def validate_task_fields(title: Optional[str] = None, estimated: Optional[int] = None,
                         actual: Optional[int] = None) -> None:
    """Raise ValidationError for any provided field that is out of range"""
    if title is not None and not str(title).strip():
        raise ValidationError("Task title must not be empty")
    if estimated is not None:
        if isinstance(estimated, bool) or not isinstance(estimated, int) or estimated <= 0:
            raise ValidationError(f"Estimated minutes must be a positive integer, got {estimated!r}")
    if actual is not None:
        if isinstance(actual, bool) or not isinstance(actual, int) or actual < 0:
            raise ValidationError(f"Actual minutes must be a non-negative integer, got {actual!r}")


# ==================== Capacity Calculator ====================

def compute_metrics(tasks: List[Task], now: datetime, workday: Optional[Workday] = None) -> DayMetrics:
    """
    Aggregate a day's tasks against the work calendar

    Args:
        tasks: The day's tasks
        now: Current local time
        workday: Work calendar (default: 08:30-17:30, lunch 12:30-13:30)

    Returns:
        DayMetrics; workload_ratio is 1.0 when no work-minutes remain
    """
    if workday is None:
        workday = Workday()

    total_estimated = 0
    total_actual = 0
    achieved_work = 0
    remaining_work = 0

    for task in tasks:
        total_estimated += task.estimated
        total_actual += task.actual
        if task.status == TaskStatus.DONE.value:
            achieved_work += task.estimated
        elif task.status not in CLOSED_STATUSES:
            remaining_work += max(0, task.estimated - task.actual)

    remaining = workday.remaining_minutes(now)
    if remaining > 0:
        ratio = remaining_work / remaining
    else:
        ratio = 1.0

    return DayMetrics(
        total_estimated=total_estimated,
        total_actual=total_actual,
        achieved_work=achieved_work,
        remaining_work=remaining_work,
        remaining_minutes=remaining,
        workload_ratio=ratio,
        capacity=workday.capacity,
    )


def severity_band(ratio: float, inverted: bool = False) -> str:
    """
    Colour band for a progress ratio

    Inverted scales (planned load, workload, task clock) get worse as the
    ratio grows; normal scales (worked, achieved) get worse as it shrinks.
    """
    if inverted:
        if ratio >= 1.0:
            return 'red'
        elif ratio >= 0.9:
            return 'dark-orange'
        elif ratio >= 0.8:
            return 'orange'
        elif ratio >= 0.7:
            return 'yellow'
        elif ratio >= 0.6:
            return 'green'
        return 'blue'

    if ratio >= 1.0:
        return 'blue'
    elif ratio >= 0.9:
        return 'green'
    elif ratio >= 0.7:
        return 'yellow'
    elif ratio >= 0.6:
        return 'orange'
    elif ratio >= 0.5:
        return 'dark-orange'
    return 'red'


BAND_MARKERS = {
    'blue': '🔵',
    'green': '🟢',
    'yellow': '🟡',
    'orange': '🟠',
    'dark-orange': '🟤',
    'red': '🔴',
}


def render_bar(ratio: float, inverted: bool = False, width: int = 30) -> str:
    """Plain-text progress bar with its severity marker"""
    filled = int(round(min(max(ratio, 0.0), 1.0) * width))
    marker = BAND_MARKERS[severity_band(ratio, inverted)]
    return f"{marker} [{'█' * filled}{'░' * (width - filled)}] {ratio * 100:5.1f}%"


# ==================== Engine Facade ====================

class DailyManager:
    """
    Day planner backed by a task store

    Every operation loads the day's bucket, applies one change and writes the
    bucket back. `now` is always passed in by the caller.
    """

    def __init__(self, store: TaskStore, notes: Optional[NoteStore] = None,
                 workday: Optional[Workday] = None):
        """
        Initialize DailyManager

        Args:
            store: Task persistence
            notes: Note persistence (optional, only needed for note commands)
            workday: Work calendar (default: 08:30-17:30, 480 min capacity)
        """
        self.logger = logging.getLogger("DailyManager")
        self.store = store
        self.notes = notes
        self.workday = workday or Workday()

    @classmethod
    def from_config(cls, config: Dict[str, Any], data_dir: Optional[str] = None) -> 'DailyManager':
        """Build a manager with stores under the configured data directory"""
        storage = config['storage']
        base = Path(data_dir or storage['data_dir']).expanduser()
        return cls(
            store=TaskStore(base / storage['tasks_file']),
            notes=NoteStore(base / storage['notes_file']),
            workday=Workday.from_config(config.get('workday', {})),
        )

    def _load(self, day: str) -> List[Task]:
        return [Task.from_dict(record) for record in self.store.load_day(day)]

    def _save(self, day: str, tasks: List[Task]) -> None:
        self.store.save_day(day, [task.to_dict() for task in tasks])

    # ==================== Task Operations ====================

    def list_tasks(self, day: str) -> List[Task]:
        """Tasks of the day in display order"""
        return self._load(day)

    def add_task(self, day: str, title: str, estimated: int) -> Task:
        """
        Append a pending task to the day

        Planning beyond the daily capacity is allowed; it is only logged.

        Raises:
            ValidationError: empty title or non-positive estimate
        """
        validate_task_fields(title=title, estimated=estimated)

        tasks = self._load(day)
        planned = sum(t.estimated for t in tasks) + estimated
        if planned > self.workday.capacity:
            self.logger.warning(
                f"Total estimated time for {day} exceeds daily capacity: "
                f"{planned}/{self.workday.capacity} min"
            )

        task = Task(title=title.strip(), estimated=estimated)
        tasks.append(task)
        self._save(day, tasks)

        self.logger.info(f"Added '{task.title[:40]}' ({estimated} min) to {day}")
        return task

    def transition(self, day: str, index: int, status: Union[TaskStatus, str], now: datetime) -> Task:
        """
        Set the status of the task at `index`

        Raises:
            TaskIndexError: index out of range
            AlreadyRunningNotice: starting while another task runs (nothing saved)
        """
        tasks = self._load(day)
        previous = _check_index(tasks, index).actual
        task = apply_transition(tasks, index, status, now)
        self._save(day, tasks)

        settled = task.actual - previous
        if settled:
            self.logger.info(f"Settled {settled} min into '{task.title[:40]}'")
        self.logger.info(f"'{task.title[:40]}' -> {task.status}")
        return task

    def delete_task(self, day: str, index: int) -> Task:
        """
        Remove the task at `index`; later tasks shift down by one

        A running task is removed without settling, so its open span is lost.

        Raises:
            TaskIndexError: index out of range
        """
        tasks = self._load(day)
        _check_index(tasks, index)
        task = tasks.pop(index)
        if task.started_at:
            self.logger.warning(f"Deleted running task '{task.title[:40]}'; unsettled time discarded")
        self._save(day, tasks)

        self.logger.info(f"Deleted '{task.title[:40]}' from {day}")
        return task

    def edit_task(self, day: str, index: int, title: Optional[str] = None,
                  estimated: Optional[int] = None, actual: Optional[int] = None) -> Task:
        """
        Overwrite task fields directly

        This is the only way `actual` can go down.

        Raises:
            TaskIndexError: index out of range
            ValidationError: a provided field is out of range
        """
        validate_task_fields(title=title, estimated=estimated, actual=actual)

        tasks = self._load(day)
        task = _check_index(tasks, index)
        if title is not None:
            task.title = title.strip()
        if estimated is not None:
            task.estimated = estimated
        if actual is not None:
            task.actual = actual
        self._save(day, tasks)

        self.logger.info(f"Edited '{task.title[:40]}' in {day}")
        return task

    def find_started(self, day: str) -> Optional[Tuple[int, Task]]:
        return find_started(self._load(day))

    def start_next(self, day: str, skip: int = 0) -> Optional[Tuple[int, Task]]:
        """
        Candidate task to start next; does not start it

        Raises:
            AlreadyRunningNotice: a task is already started
        """
        return next_pending(self._load(day), skip=skip)

    def finish_current(self, day: str, now: datetime) -> Optional[Task]:
        """Mark the running task done; None if nothing runs"""
        running = self.find_started(day)
        if running is None:
            return None
        return self.transition(day, running[0], TaskStatus.DONE, now)

    def stop_current(self, day: str, now: datetime) -> Optional[Task]:
        """Put the running task back to pending; None if nothing runs"""
        running = self.find_started(day)
        if running is None:
            return None
        return self.transition(day, running[0], TaskStatus.PENDING, now)

    def compute_metrics(self, day: str, now: datetime) -> DayMetrics:
        return compute_metrics(self._load(day), now, self.workday)

    # ==================== Notes ====================

    def _note_store(self) -> NoteStore:
        if self.notes is None:
            raise DailyError("No note store configured")
        return self.notes

    def notes_for(self, day: str) -> List[str]:
        return self._note_store().load_day(day)

    def add_note(self, day: str, text: str) -> List[str]:
        if not text.strip():
            raise ValidationError("Note must not be empty")
        return self._note_store().add_note(day, text.strip())

    def edit_notes(self, day: str, editor: str) -> List[str]:
        """
        Edit the day's notes in an external editor, one note per line

        The store is only rewritten when the editor exits successfully.
        """
        store = self._note_store()
        notes = store.load_day(day)

        fd, tmp = tempfile.mkstemp(prefix='daily_note_', suffix='.md')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                for note in notes:
                    f.write(note + '\n')

            self.logger.info(f"Opening notes for {day} in {editor}")
            try:
                result = subprocess.run(shlex.split(editor) + [tmp])
            except (OSError, ValueError) as e:
                raise DailyError(f"Cannot run editor '{editor}': {e}") from e
            if result.returncode != 0:
                raise DailyError(f"Editor '{editor}' exited with status {result.returncode}; notes unchanged")

            content = Path(tmp).read_text(encoding='utf-8')
        finally:
            os.unlink(tmp)

        store.set_notes(day, content.replace('\r\n', '\n').split('\n'))
        return store.load_day(day)


# ==================== Configuration ====================

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Setup the DailyManager logger"""
    logger = logging.getLogger("DailyManager")

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - DailyManager - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    return logger


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML, layered over the built-in defaults

    Args:
        config_path: Explicit config file (must exist). When omitted,
            ~/.config/daily/config.yaml is used if present.

    Returns:
        Complete config dict
    """
    if config_path is None:
        path = DEFAULT_CONFIG_PATH.expanduser()
        if not path.exists():
            return copy.deepcopy(DEFAULT_CONFIG)
    else:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValidationError(f"Config file {path} must contain a mapping")

    for section, value in loaded.items():
        if section in DEFAULT_CONFIG and not isinstance(value, dict):
            raise ValidationError(f"Config section '{section}' in {path} must be a mapping")

    config = _merge(DEFAULT_CONFIG, loaded)
    for key in ('data_dir', 'tasks_file', 'notes_file'):
        if not isinstance(config['storage'][key], str) or not config['storage'][key].strip():
            raise ValidationError(f"Config value storage.{key} in {path} must be a non-empty string")

    return config


def _editor(config: Dict[str, Any]) -> str:
    return config.get('notes', {}).get('editor') or os.environ.get('EDITOR') or 'nano'


# ==================== CLI Interface ====================

def _print_task(number: int, task: Task) -> None:
    print(f"  {number}. {task.title} ({task.status}, est: {task.estimated}min, act: {task.actual}min)")


def _print_plan(day: str, tasks: List[Task], metrics: DayMetrics, is_today: bool) -> None:
    print(f"\n📅 DAILY PLAN {day}:")
    print("=" * 60)
    print(f"Plan:     {render_bar(metrics.planned_ratio, inverted=True)} "
          f"[{metrics.total_estimated}/{metrics.capacity} min planned]")
    if is_today:
        print(f"Worked:   {render_bar(metrics.worked_ratio)} "
              f"[{metrics.total_actual}/{metrics.capacity} min worked]")
        print(f"Achieved: {render_bar(metrics.achieved_ratio)} "
              f"[{metrics.achieved_work}/{metrics.total_estimated} min achieved]")
        print(f"Workload: {render_bar(metrics.workload_ratio, inverted=True)} "
              f"[{metrics.remaining_minutes} min left vs {metrics.remaining_work} min to do]")
    print()
    for i, task in enumerate(tasks, 1):
        _print_task(i, task)


def build_parser() -> 'argparse.ArgumentParser':
    import argparse

    parser = argparse.ArgumentParser(
        prog='daily',
        description="Daily task management CLI"
    )
    parser.add_argument('--config', help='Path to config file')
    parser.add_argument('--data-dir', help='Directory holding tasks.yaml and notes.yaml')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log progress to stderr')

    sub = parser.add_subparsers(dest='command', required=True)

    add = sub.add_parser('add', help='Add a new task')
    add.add_argument('title', help='Task title')
    add.add_argument('minutes', type=int, help='Estimated minutes')
    add.add_argument('--tomorrow', action='store_true', help="Add to tomorrow's plan")

    ls = sub.add_parser('ls', help='List tasks with progress')
    when = ls.add_mutually_exclusive_group()
    when.add_argument('--tomorrow', action='store_true', help="Show tomorrow's plan")
    when.add_argument('--date', help='Show the plan for YYYY-MM-DD')

    status = sub.add_parser('status', help='Set the status of a task')
    status.add_argument('index', type=int, help='Task number as shown by ls')
    status.add_argument('status', choices=[s.value for s in TaskStatus], help='New status')

    nxt = sub.add_parser('next', help='Show (or start) the next pending task')
    nxt.add_argument('--start', action='store_true', help='Start the candidate')
    nxt.add_argument('--skip', type=int, default=0, help='Skip this many pending candidates')

    sub.add_parser('current', help='Show the currently running task')
    sub.add_parser('finish', help='Mark the current task as done')
    sub.add_parser('stop', help='Stop the current task')

    delete = sub.add_parser('delete', help='Delete a task')
    delete.add_argument('index', type=int, help='Task number as shown by ls')

    edit = sub.add_parser('edit', help='Edit task fields')
    edit.add_argument('index', type=int, help='Task number as shown by ls')
    edit.add_argument('--title')
    edit.add_argument('--estimated', type=int)
    edit.add_argument('--actual', type=int)

    sub.add_parser('yesterday', help='Show tasks from yesterday')

    note = sub.add_parser('note', help='Add, show, or edit notes (note <text> | note edit [date] | note edit-yesterday)')
    note.add_argument('words', nargs='*', help='Note text, or edit/edit-yesterday')

    return parser


def main(argv: Optional[List[str]] = None, now: Optional[datetime] = None) -> int:
    """CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if now is None:
        now = datetime.now()
    today = day_key(now)
    tomorrow = day_key(now + timedelta(days=1))
    yesterday = day_key(now - timedelta(days=1))

    try:
        config = load_config(args.config)
        setup_logging('INFO' if args.verbose else config.get('logging', {}).get('level', 'WARNING'))
        manager = DailyManager.from_config(config, data_dir=args.data_dir)
    except (OSError, yaml.YAMLError, DailyError) as e:
        print(f"❌ Failed to initialize DailyManager: {e}")
        return 1

    try:
        if args.command == 'add':
            day = tomorrow if args.tomorrow else today
            task = manager.add_task(day, args.title, args.minutes)
            metrics = manager.compute_metrics(day, now)
            print(f"✅ Added '{task.title}' ({task.estimated} min) for {day}")
            if metrics.over_capacity:
                print(f"⚠️  Total estimated time exceeds {metrics.capacity // 60} hours "
                      f"({metrics.total_estimated}/{metrics.capacity} min)")

        elif args.command == 'ls':
            if args.date:
                day = parse_day(args.date)
            else:
                day = tomorrow if args.tomorrow else today
            tasks = manager.list_tasks(day)
            if not tasks:
                print("No tasks available.")
                return 0
            _print_plan(day, tasks, compute_metrics(tasks, now, manager.workday), is_today=(day == today))

        elif args.command == 'status':
            task = manager.transition(today, args.index - 1, args.status, now)
            print(f"✅ '{task.title}' is now {task.status} (act: {task.actual}min)")

        elif args.command == 'next':
            candidate = manager.start_next(today, skip=args.skip)
            if candidate is None:
                print("No pending tasks to start.")
                return 0
            index, task = candidate
            if args.start:
                print(f"▶️  Starting '{task.title}'...")
                manager.transition(today, index, TaskStatus.STARTED, now)
            else:
                print(f"Next task: [{index + 1}] {task.title} ({task.estimated} min)")
                print("Run `daily next --start` to start it, or `--skip 1` to see the one after.")

        elif args.command == 'current':
            running = manager.find_started(today)
            if running is None:
                print("No task is currently started.")
                return 0
            index, task = running
            elapsed = elapsed_minutes(task, now)
            spent = task.actual + elapsed
            clock = spent / task.estimated if task.estimated else 1.0
            print(f"Task Clock: {render_bar(clock, inverted=True)} [{spent}/{task.estimated} min used]")
            print(f"Current task: [{index + 1}] {task.title} - started {elapsed}min ago")

        elif args.command == 'finish':
            task = manager.finish_current(today, now)
            if task is None:
                print("No task is currently started.")
            else:
                print(f"✅ Finished '{task.title}' (act: {task.actual}min / est: {task.estimated}min)")

        elif args.command == 'stop':
            task = manager.stop_current(today, now)
            if task is None:
                print("No task is currently started.")
            else:
                print(f"⏸️  Stopped '{task.title}' (act: {task.actual}min)")

        elif args.command == 'delete':
            task = manager.delete_task(today, args.index - 1)
            print(f"🗑️  Deleted '{task.title}'")

        elif args.command == 'edit':
            task = manager.edit_task(today, args.index - 1, title=args.title,
                                     estimated=args.estimated, actual=args.actual)
            _print_task(args.index, task)

        elif args.command == 'yesterday':
            tasks = manager.list_tasks(yesterday)
            if not tasks:
                print("No tasks found for yesterday.")
                return 0

            print(f"Tasks from yesterday ({yesterday}):\n")
            for i, task in enumerate(tasks, 1):
                print(f"[{i}] {task.title}")
                print(f"    Status: {task.status}")
                print(f"    Estimated: {task.estimated} minutes")
                print(f"    Actual: {task.actual} minutes")
                if i < len(tasks):
                    print()

            metrics = compute_metrics(tasks, now, manager.workday)
            percent = (metrics.total_actual / metrics.total_estimated * 100) if metrics.total_estimated else 0.0
            print(f"\nSummary: {len(tasks)} tasks, {metrics.total_actual}/{metrics.total_estimated} minutes ({percent:.1f}%)")

        elif args.command == 'note':
            words = args.words
            if words and words[0] == 'edit-yesterday':
                manager.edit_notes(yesterday, _editor(config))
                print(f"Notes for {yesterday} updated.")
            elif words and words[0] == 'edit':
                day = parse_day(words[1]) if len(words) > 1 else today
                manager.edit_notes(day, _editor(config))
                print(f"Notes for {day} updated.")
            elif not words:
                notes = manager.notes_for(today)
                if not notes:
                    print("No notes for today.")
                    return 0
                print(f"Notes for today ({today}):")
                for i, note in enumerate(notes, 1):
                    print(f"{i}. {note}")
            else:
                manager.add_note(today, ' '.join(words))
                print("Note added for today.")

    except AlreadyRunningNotice as notice:
        print(f"ℹ️  {notice}")
        return 0
    except (DailyError, StoreError) as e:
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
