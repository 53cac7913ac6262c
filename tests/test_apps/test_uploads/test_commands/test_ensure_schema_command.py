"""Tests for ensure_schema management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from quickfile.apps.uploads.exceptions import SchemaVersionMismatchError
from quickfile.apps.uploads.models import SCHEMA_VERSION, SchemaVersion


@pytest.mark.django_db
class TestEnsureSchemaCommand:
    """Tests for ensure_schema management command."""

    def test_creates_version(self):
        """Test the command records and reports the schema version."""
        out = StringIO()
        call_command('ensure_schema', stdout=out)

        assert SchemaVersion.objects.get().version == SCHEMA_VERSION
        assert f'Schema version {SCHEMA_VERSION} ready' in out.getvalue()

    def test_repeated_runs(self):
        """Test running twice is harmless."""
        call_command('ensure_schema', stdout=StringIO())
        call_command('ensure_schema', stdout=StringIO())

        assert SchemaVersion.objects.count() == 1

    def test_mismatch_is_fatal(self):
        """Test a stored version from other code aborts the command."""
        SchemaVersion.objects.create(version=SCHEMA_VERSION + 1)

        with pytest.raises(SchemaVersionMismatchError):
            call_command('ensure_schema', stdout=StringIO())
