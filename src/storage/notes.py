"""
Note Store

Free-text notes per day, kept in a YAML file beside the tasks.
"""

from pathlib import Path
from typing import List, Union

from .base import StoreError, YamlDayFile


class NoteStore:
    """Day-keyed free-text notes backed by a YAML file"""

    def __init__(self, path: Union[str, Path]):
        self._file = YamlDayFile(path, "DailyManager.Storage.Notes")
        self.path = self._file.path
        self.logger = self._file.logger

    def load_day(self, day: str) -> List[str]:
        notes = self._file.read().get(day) or []
        if not isinstance(notes, list):
            raise StoreError(f"Notes for {day} in {self.path} are not a list")
        return [str(note) for note in notes]

    def add_note(self, day: str, text: str) -> List[str]:
        """Append a note to the day and return the day's notes"""
        data = self._file.read()
        notes = list(data.get(day) or [])
        notes.append(text)
        data[day] = notes
        self._file.write(data)
        self.logger.info(f"Added note for {day} ({len(notes)} total)")
        return notes

    def set_notes(self, day: str, notes: List[str]) -> None:
        """Replace the day's notes, dropping blank lines"""
        data = self._file.read()
        data[day] = [note.strip() for note in notes if note.strip()]
        self._file.write(data)
        self.logger.info(f"Replaced notes for {day} ({len(data[day])} total)")
