"""
Task Store

Persists day buckets of task records in a YAML file:

    "2026-10-19":
    - title: Write report
      estimated: 60
      actual: 15
      status: pending
      started_at: 0
"""

from pathlib import Path
from typing import Any, Dict, List, Union

from .base import StoreError, YamlDayFile

RECORD_FIELDS = ('title', 'estimated', 'actual', 'status', 'started_at')


class TaskStore:
    """Day-keyed task records backed by a YAML file"""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize task store

        Args:
            path: Location of the tasks YAML file (created on first save)
        """
        self._file = YamlDayFile(path, "DailyManager.Storage.Tasks")
        self.path = self._file.path
        self.logger = self._file.logger

    def load_all(self) -> Dict[str, List[Dict[str, Any]]]:
        """Load every day bucket, records normalised"""
        raw = self._file.read()
        data = {}
        for day, records in raw.items():
            if records is None:
                records = []
            if not isinstance(records, list):
                raise StoreError(f"Day {day} in {self.path} is not a list of tasks")
            data[day] = [self._normalize(record, day) for record in records]
        return data

    def load_day(self, day: str) -> List[Dict[str, Any]]:
        """
        Load the task records for one day

        Args:
            day: Date key (YYYY-MM-DD)

        Returns:
            Ordered list of task records, empty if the day has none
        """
        records = self.load_all().get(day, [])
        self.logger.debug(f"Loaded {len(records)} tasks for {day}")
        return records

    def save_day(self, day: str, records: List[Dict[str, Any]]) -> None:
        """
        Replace one day's bucket, leaving every other day untouched

        Args:
            day: Date key (YYYY-MM-DD)
            records: Ordered task records for that day
        """
        data = self.load_all()
        data[day] = [self._normalize(record, day) for record in records]
        self.save_all(data)
        self.logger.info(f"Saved {len(records)} tasks for {day}")

    def save_all(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        """Write all day buckets"""
        self._file.write(data)

    def _normalize(self, record: Any, day: str) -> Dict[str, Any]:
        """Coerce a stored record into the canonical field set"""
        if not isinstance(record, dict):
            raise StoreError(f"Malformed task in {day}: {record!r}")

        try:
            return {
                'title': str(record.get('title') or ''),
                'estimated': _whole_number(record.get('estimated')),
                'actual': _whole_number(record.get('actual')),
                'status': str(record.get('status') or 'pending'),
                'started_at': _whole_number(record.get('started_at')),
            }
        except (TypeError, ValueError) as e:
            raise StoreError(f"Malformed task in {day}: {record!r} ({e})") from e


def _whole_number(value: Any) -> int:
    """Integer field value; missing is 0, fractions and booleans are rejected"""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError(f"expected a whole number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected a whole number, got {value!r}")
        return int(value)
    return int(value)
