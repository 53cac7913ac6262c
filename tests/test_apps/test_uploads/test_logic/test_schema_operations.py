"""Tests for schema creation and verification."""

import pytest

from quickfile.apps.uploads.exceptions import SchemaVersionMismatchError
from quickfile.apps.uploads.logic.schema_operations import (
    ensure_schema,
    verify_schema,
)
from quickfile.apps.uploads.models import SCHEMA_VERSION, SchemaVersion


@pytest.mark.django_db
def test_ensure_schema_records_version():
    """Test ensure_schema inserts the version row."""
    version = ensure_schema()

    assert version.pk == SchemaVersion.SINGLETON_ID
    assert version.version == SCHEMA_VERSION
    assert SchemaVersion.objects.count() == 1


@pytest.mark.django_db
def test_ensure_schema_idempotent():
    """Test repeated calls keep a single row."""
    ensure_schema()
    ensure_schema()

    assert SchemaVersion.objects.count() == 1


@pytest.mark.django_db
def test_ensure_schema_keeps_existing_version():
    """Test an existing row is not overwritten."""
    SchemaVersion.objects.create(version=SCHEMA_VERSION + 1)

    version = ensure_schema()

    assert version.version == SCHEMA_VERSION + 1


@pytest.mark.django_db
def test_verify_schema():
    """Test a matching version verifies."""
    ensure_schema()

    assert verify_schema() == SCHEMA_VERSION


@pytest.mark.django_db
def test_verify_schema_missing():
    """Test a missing version row is fatal."""
    with pytest.raises(SchemaVersionMismatchError) as exc_info:
        verify_schema()

    assert exc_info.value.expected == SCHEMA_VERSION
    assert exc_info.value.found is None


@pytest.mark.django_db
def test_verify_schema_mismatch():
    """Test a different stored version is fatal."""
    SchemaVersion.objects.create(version=SCHEMA_VERSION + 1)

    with pytest.raises(SchemaVersionMismatchError, match='mismatch'):
        verify_schema()
