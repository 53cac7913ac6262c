"""Tests for run_maintenance management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from quickfile.apps.uploads.exceptions import SchemaVersionMismatchError
from quickfile.apps.uploads.logic.file_operations import expire_now, insert_file
from quickfile.apps.uploads.logic.schema_operations import ensure_schema
from quickfile.apps.uploads.models import Chunk, FileRecord


@pytest.fixture
def schema(db):
    """Record the schema version the command verifies.

    Returns:
        SchemaVersion row.
    """
    return ensure_schema()


@pytest.mark.django_db
class TestRunMaintenanceCommand:
    """Tests for run_maintenance management command."""

    def test_once_deletes_expired(self, schema, insert_meta, stream):
        """Test a single cycle deletes expired files and their rows."""
        kept = insert_file(insert_meta, stream(10))
        expired = insert_file(insert_meta, stream(10))
        expire_now(expired.pk)

        out = StringIO()
        call_command('run_maintenance', '--once', stdout=out)

        assert list(FileRecord.all_objects.values_list('id', flat=True)) == [
            kept.pk,
        ]
        assert not Chunk.objects.filter(file_id=expired.pk).exists()
        assert 'Deleted 1 files, 1 chunks, 3 tags' in out.getvalue()
        assert 'Vacuum skipped' in out.getvalue()

    def test_once_nothing_to_do(self, schema, insert_meta, stream):
        """Test a cycle with nothing expired deletes nothing."""
        insert_file(insert_meta, stream(10))

        out = StringIO()
        call_command('run_maintenance', '--once', stdout=out)

        assert FileRecord.all_objects.count() == 1
        assert 'Deleted 0 files, 0 chunks, 0 tags' in out.getvalue()

    def test_dry_run(self, schema, insert_meta, stream):
        """Test --dry-run reports without deleting."""
        expired = insert_file(insert_meta, stream(10))
        expire_now(expired.pk)

        out = StringIO()
        call_command('run_maintenance', '--dry-run', stdout=out)

        assert FileRecord.all_objects.filter(pk=expired.pk).exists()
        assert 'Would delete 1 expired files' in out.getvalue()

    def test_requires_schema(self):
        """Test the command refuses to run on an unversioned database."""
        with pytest.raises(SchemaVersionMismatchError):
            call_command('run_maintenance', '--once', stdout=StringIO())

    def test_loop_stops_on_interrupt(self, schema, monkeypatch):
        """Test the periodic loop exits cleanly on Ctrl-C."""
        def interrupted(self, interval, stop_event):
            assert interval == 5
            raise KeyboardInterrupt

        monkeypatch.setattr(
            'quickfile.apps.uploads.logic.maintenance.MaintenanceWorker.run_forever',
            interrupted,
        )

        out = StringIO()
        call_command('run_maintenance', '--interval=5', stdout=out)

        assert 'Running maintenance every 5.0 seconds' in out.getvalue()
        assert 'Maintenance stopped' in out.getvalue()
