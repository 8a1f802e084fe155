"""
Tests for the YAML task and note stores
"""

import pytest
import yaml

from storage import NoteStore, StoreError, TaskStore

DAY = '2026-10-19'


def _record(title, estimated=30, actual=0, status='pending', started_at=0):
    return {
        'title': title,
        'estimated': estimated,
        'actual': actual,
        'status': status,
        'started_at': started_at,
    }


class TestTaskStore:
    """Day-keyed task persistence"""

    def test_missing_file_is_empty(self, tmp_path):
        store = TaskStore(tmp_path / 'tasks.yaml')
        assert store.load_day(DAY) == []
        assert store.load_all() == {}

    def test_save_then_load_round_trip(self, tmp_path):
        store = TaskStore(tmp_path / 'tasks.yaml')
        records = [
            _record('First', 60, 15, 'done'),
            _record('Second', 20, 0, 'started', 1760860800),
            _record('Third', 45),
        ]

        store.save_day(DAY, records)

        assert TaskStore(tmp_path / 'tasks.yaml').load_day(DAY) == records

    def test_save_day_keeps_other_days(self, tmp_path):
        store = TaskStore(tmp_path / 'tasks.yaml')
        store.save_day('2026-10-18', [_record('Yesterday')])
        store.save_day(DAY, [_record('Today')])

        assert [r['title'] for r in store.load_day('2026-10-18')] == ['Yesterday']
        assert [r['title'] for r in store.load_day(DAY)] == ['Today']

    def test_creates_parent_directory(self, tmp_path):
        store = TaskStore(tmp_path / 'nested' / 'dir' / 'tasks.yaml')
        store.save_day(DAY, [_record('A')])
        assert store.path.exists()

    def test_file_layout(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        TaskStore(path).save_day(DAY, [_record('A', 30)])

        data = yaml.safe_load(path.read_text())
        assert data == {DAY: [_record('A', 30)]}

    def test_unquoted_dates_and_missing_fields(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("2026-10-19:\n- title: Hand edited\n  estimated: 25\n")

        records = TaskStore(path).load_day(DAY)

        assert records == [_record('Hand edited', 25)]

    def test_unknown_status_kept_verbatim(self, tmp_path):
        store = TaskStore(tmp_path / 'tasks.yaml')
        store.save_day(DAY, [_record('A', status='blocked')])
        assert store.load_day(DAY)[0]['status'] == 'blocked'

    def test_invalid_yaml_raises_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("2026-10-19: [unclosed\n")

        with pytest.raises(StoreError):
            TaskStore(path).load_day(DAY)

    def test_non_mapping_raises_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("- just\n- a list\n")

        with pytest.raises(StoreError):
            TaskStore(path).load_all()

    def test_malformed_record_raises_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("'2026-10-19':\n- title: A\n  estimated: lots\n")

        with pytest.raises(StoreError):
            TaskStore(path).load_day(DAY)

    def test_fractional_minutes_raise_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("'2026-10-19':\n- title: A\n  estimated: 30.7\n")

        with pytest.raises(StoreError):
            TaskStore(path).load_day(DAY)

    def test_boolean_minutes_raise_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("'2026-10-19':\n- title: A\n  estimated: 30\n  actual: true\n")

        with pytest.raises(StoreError):
            TaskStore(path).load_day(DAY)

    def test_whole_float_and_numeric_string_accepted(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.write_text("'2026-10-19':\n- title: A\n  estimated: 30.0\n  actual: '12'\n")

        assert TaskStore(path).load_day(DAY) == [_record('A', 30, 12)]

    def test_store_error_is_io_error(self):
        assert issubclass(StoreError, IOError)

    def test_unreadable_file_raises_store_error(self, tmp_path):
        path = tmp_path / 'tasks.yaml'
        path.mkdir()

        with pytest.raises(StoreError):
            TaskStore(path).load_day(DAY)

    def test_unwritable_parent_raises_store_error(self, tmp_path):
        blocker = tmp_path / 'blocker'
        blocker.write_text("not a directory\n")
        store = TaskStore(blocker / 'tasks.yaml')

        with pytest.raises(StoreError):
            store.save_day(DAY, [_record('A')])

        assert blocker.read_text() == "not a directory\n"

    def test_no_temp_files_left_behind(self, tmp_path):
        store = TaskStore(tmp_path / 'tasks.yaml')
        store.save_day(DAY, [_record('A')])
        store.save_day(DAY, [_record('B')])

        assert sorted(p.name for p in tmp_path.iterdir()) == ['tasks.yaml']


class TestNoteStore:
    """Day-keyed note persistence"""

    def test_add_and_load(self, tmp_path):
        store = NoteStore(tmp_path / 'notes.yaml')

        store.add_note(DAY, 'first')
        notes = store.add_note(DAY, 'second')

        assert notes == ['first', 'second']
        assert store.load_day(DAY) == ['first', 'second']
        assert store.load_day('2026-10-20') == []

    def test_set_notes_drops_blank_lines(self, tmp_path):
        store = NoteStore(tmp_path / 'notes.yaml')
        store.add_note(DAY, 'old')

        store.set_notes(DAY, ['  kept  ', '', '   ', 'also kept'])

        assert store.load_day(DAY) == ['kept', 'also kept']


class TestPackageExports:
    """Public names of the storage package"""

    def test_exports_stores_only(self):
        import storage

        assert sorted(storage.__all__) == ['NoteStore', 'StoreError', 'TaskStore']
        assert not hasattr(storage, 'atomic_write')
