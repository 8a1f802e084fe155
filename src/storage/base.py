"""
Shared YAML file mechanics for the day-keyed stores.

Both stores keep one YAML mapping per file, keyed by ``YYYY-MM-DD``. The
whole mapping is read and written on every call; there is no locking, so two
processes writing the same file race and the last writer wins.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

import yaml


class StoreError(IOError):
    """Store file exists but cannot be read, parsed or written"""


def atomic_write(path: Path, content: str) -> None:
    """Write content atomically via tempfile + rename."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
    try:
        os.write(fd, content.encode('utf-8'))
        os.close(fd)
        fd = -1
        os.replace(tmp, path)
    except Exception:
        if fd >= 0:
            try:
                os.close(fd)
            except OSError:
                pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


class YamlDayFile:
    """A YAML file holding a mapping of date keys to lists"""

    def __init__(self, path: Union[str, Path], logger_name: str = "DailyManager.Storage"):
        self.path = Path(path).expanduser()
        self.logger = logging.getLogger(logger_name)

    def read(self) -> Dict[str, Any]:
        """
        Read the whole mapping

        Returns:
            Dict keyed by date string; empty if the file does not exist

        Raises:
            StoreError: file exists but is unreadable or not a YAML mapping
        """
        if not self.path.exists():
            self.logger.debug(f"Store file not found, starting empty: {self.path}")
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise StoreError(f"Invalid YAML in {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StoreError(f"Expected a mapping of dates in {self.path}, got {type(data).__name__}")

        # Unquoted dates come back from YAML as datetime.date objects
        return {str(key): value for key, value in data.items()}

    def write(self, data: Dict[str, Any]) -> None:
        """
        Replace the file contents with data

        Raises:
            StoreError: directory cannot be created or file cannot be written
        """
        content = yaml.safe_dump(data, sort_keys=True, allow_unicode=True, default_flow_style=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(self.path, content)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

        self.logger.debug(f"Wrote {len(data)} day(s) to {self.path}")
