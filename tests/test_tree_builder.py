from __future__ import annotations

import re

from markdown_cms.services import tree_builder
from markdown_cms.services.tree_builder import build_directory_contents, build_tree

ISO_MS = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$')


def _touch(path, text='x'):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')


def _names(nodes):
    return [node.name for node in nodes]


def _walk(nodes):
    for node in nodes:
        yield node
        if node.children:
            yield from _walk(node.children)


def test_missing_root_is_created_and_empty(tmp_path):
    root = tmp_path / 'content'

    result = build_tree(str(root))

    assert result.success is True
    assert result.data == {'files': []}
    assert root.is_dir()


def test_filters_hidden_entries_and_non_markdown(tmp_path):
    _touch(tmp_path / 'keep.md')
    _touch(tmp_path / 'notes.txt')
    _touch(tmp_path / 'UPPER.MD')
    _touch(tmp_path / 'long.markdown')
    _touch(tmp_path / 'component.mdx')
    _touch(tmp_path / '.hidden.md')
    _touch(tmp_path / '.git' / 'config')
    _touch(tmp_path / 'assets' / 'logo.png')

    files = build_tree(str(tmp_path)).data['files']

    assert _names(files) == ['assets', 'keep.md']
    assert files[0].children == []
    for node in _walk(files):
        assert not node.name.startswith('.')
        if node.type == 'file':
            assert node.name.endswith('.md')


def test_directories_first_then_by_name(tmp_path):
    _touch(tmp_path / 'b.md')
    _touch(tmp_path / 'a.md')
    (tmp_path / 'beta').mkdir()
    (tmp_path / 'alpha').mkdir()
    _touch(tmp_path / 'alpha' / 'z.md')
    _touch(tmp_path / 'alpha' / 'm.md')
    (tmp_path / 'alpha' / 'inner').mkdir()

    files = build_tree(str(tmp_path)).data['files']

    assert _names(files) == ['alpha', 'beta', 'a.md', 'b.md']
    assert _names(files[0].children) == ['inner', 'm.md', 'z.md']


def test_paths_are_posix_relative(tmp_path):
    _touch(tmp_path / 'docs' / 'api' / 'intro.md')

    files = build_tree(str(tmp_path)).data['files']

    intro = files[0].children[0].children[0]
    assert intro.path == 'docs/api/intro.md'
    assert files[0].children[0].path == 'docs/api'


def test_nodes_carry_modification_time(tmp_path):
    _touch(tmp_path / 'docs' / 'a.md')

    files = build_tree(str(tmp_path)).data['files']

    for node in _walk(files):
        assert node.modified.ok is True
        assert ISO_MS.match(node.last_modified)


def test_stat_failure_degrades_single_entry(tmp_path, monkeypatch):
    _touch(tmp_path / 'a.md')

    def _fail(_seconds):
        raise OSError('stat failed')

    monkeypatch.setattr(tree_builder, 'iso_timestamp', _fail)

    result = build_tree(str(tmp_path))

    assert result.success is True
    node = result.data['files'][0]
    assert node.modified.ok is False
    assert node.modified.error == 'stat failed'
    assert node.last_modified is None
    assert 'last_modified' not in node.to_dict()


def test_scan_failure_fails_whole_tree(tmp_path):
    root = tmp_path / 'not-a-dir'
    root.write_text('x', encoding='utf-8')

    result = build_tree(str(root))

    assert result.success is False
    assert result.status_code == 500
    assert result.error == 'Failed to read file tree'


def test_guide_scenario(tmp_path):
    _touch(tmp_path / 'docs' / 'guide.md', '# Guide')

    files = build_tree(str(tmp_path)).data['files']

    assert [node.to_dict()['name'] for node in files] == ['docs']
    docs = files[0].to_dict()
    assert docs['type'] == 'directory'
    assert [(c['name'], c['type']) for c in docs['children']] == [('guide.md', 'file')]


def test_directory_contents_lists_one_level(tmp_path):
    _touch(tmp_path / 'docs' / 'api' / 'deep.md')
    _touch(tmp_path / 'docs' / 'intro.md')
    _touch(tmp_path / 'docs' / 'image.png')

    result = build_directory_contents(str(tmp_path), 'docs')

    assert result.success is True
    contents = result.data
    assert contents.current_path == 'docs'
    assert contents.has_parent is True
    assert contents.parent_path == ''
    assert _names(contents.items) == ['api', 'intro.md']
    assert contents.items[0].children is None
    assert contents.items[1].path == 'docs/intro.md'


def test_directory_contents_at_root(tmp_path):
    _touch(tmp_path / 'a.md')

    contents = build_directory_contents(str(tmp_path), '').data

    assert contents.has_parent is False
    assert contents.parent_path is None
    assert _names(contents.items) == ['a.md']


def test_directory_contents_nested_parent(tmp_path):
    (tmp_path / 'docs' / 'api').mkdir(parents=True)

    contents = build_directory_contents(str(tmp_path), 'docs/api').data

    assert contents.parent_path == 'docs'


def test_directory_contents_errors(tmp_path):
    _touch(tmp_path / 'a.md')

    missing = build_directory_contents(str(tmp_path), 'nope')
    not_dir = build_directory_contents(str(tmp_path), 'a.md')
    unsafe = build_directory_contents(str(tmp_path), '../outside')

    assert missing.status_code == 404
    assert missing.error == 'Directory not found: nope'
    assert not_dir.status_code == 400
    assert not_dir.error == 'Path is not a directory: a.md'
    assert unsafe.status_code == 400
    assert unsafe.error == 'Path traversal not allowed'


def test_name_order_is_case_folded_code_point(tmp_path):
    for name in ('B.md', '_a.md', 'a.md', '1.md'):
        _touch(tmp_path / name)
    (tmp_path / 'Zed').mkdir()
    (tmp_path / '_drafts').mkdir()

    files = build_tree(str(tmp_path)).data['files']

    assert _names(files) == ['_drafts', 'Zed', '1.md', '_a.md', 'a.md', 'B.md']
