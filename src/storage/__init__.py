"""
Storage backends for day-keyed task and note collections
"""

from .base import StoreError
from .tasks import TaskStore
from .notes import NoteStore

__all__ = ['StoreError', 'TaskStore', 'NoteStore']
