"""Tests for upload metadata helpers."""

import pytest

from quickfile.apps.uploads.infrastructure.metadata import (
    get_file_extension,
    guess_mime_type,
    matches_any_prefix,
)

_REDIRECTS = {
    '': 'application/octet-stream',
    'text/html': 'text/plain',
}


def test_get_file_extension():
    """Test extension extraction keeps the dot and lowercases."""
    assert get_file_extension('document.PDF') == '.pdf'
    assert get_file_extension('archive.tar.gz') == '.gz'
    assert get_file_extension('README') == ''


def test_guess_mime_type():
    """Test MIME type detection from extension."""
    assert guess_mime_type('.png', _REDIRECTS) == 'image/png'
    assert guess_mime_type('.css', _REDIRECTS) == 'text/css'
    assert guess_mime_type('.pdf', _REDIRECTS) == 'application/pdf'


def test_guess_mime_type_redirects():
    """Test resolved types are rewritten by the redirect map."""
    assert guess_mime_type('.html', _REDIRECTS) == 'text/plain'


def test_guess_mime_type_unknown():
    """Test unknown extensions use the empty-string redirect."""
    assert guess_mime_type('.nosuchext', _REDIRECTS) == 'application/octet-stream'
    assert guess_mime_type('.nosuchext', {}) == ''


@pytest.mark.parametrize(
    ('value', 'prefixes', 'expected'),
    [
        ('image/png', ['image/'], True),
        ('image/png', ['text/', 'image/png'], True),
        ('application/pdf', ['image/'], False),
        ('image/png', [], False),
        ('image/png', [''], False),
    ],
)
def test_matches_any_prefix(value, prefixes, expected):
    """Test prefix matching against MIME lists."""
    assert matches_any_prefix(value, prefixes) is expected
