from __future__ import annotations

import pytest

from markdown_cms.services.path_validator import validate_path


@pytest.mark.parametrize('value', [None, '', 42, ['a.md']])
def test_rejects_missing_or_non_string(value):
    check = validate_path(value)

    assert check.is_valid is False
    assert check.error == 'Invalid file path'


def test_rejects_whitespace_only():
    check = validate_path('   \t ')

    assert check.is_valid is False
    assert check.error == 'Empty file path'


@pytest.mark.parametrize(
    'value',
    ['../etc/passwd', 'docs/../../secret.md', 'docs/..', '..\\windows', '~/notes.md', 'docs/~backup.md', 'a..b.md'],
)
def test_rejects_traversal_anywhere(value):
    check = validate_path(value)

    assert check.is_valid is False
    assert check.error == 'Path traversal not allowed'


@pytest.mark.parametrize('value', ['/etc/passwd', '  /etc/passwd', 'C:\\Windows', 'file:name.md', 'docs/a:b.md'])
def test_rejects_absolute_paths_and_colons(value):
    check = validate_path(value)

    assert check.is_valid is False
    assert check.error == 'Absolute paths not allowed'


def test_traversal_wins_over_absolute():
    check = validate_path('/../etc')

    assert check.error == 'Path traversal not allowed'


@pytest.mark.parametrize('value', ['readme.md', 'docs/guide.md', 'docs/nested/deep/file.md', ' padded.md ', 'a.b.md'])
def test_accepts_plain_relative_paths(value):
    check = validate_path(value)

    assert check.is_valid is True
    assert check.error is None
