from __future__ import annotations

import pytest
from fastapi import HTTPException

from markdown_cms import deps
from markdown_cms.routers import git
from markdown_cms.schemas import CommitRequest, SwitchBranchRequest
from markdown_cms.services.git_repo import GitRepository
from markdown_cms.services.repositories import RepositoryConfig, StaticRepositoryResolver
from markdown_cms.services.system_cmd import MockCommandRunner


def _repo(runner: MockCommandRunner) -> GitRepository:
    return GitRepository('/repos/docs', runner=runner)


@pytest.mark.asyncio
async def test_status_lists_modified_files():
    runner = MockCommandRunner()
    runner.queue_output(' M a.md\0?? b.md\0')

    response = await git.git_status(repo=_repo(runner))

    assert response.data == {'modified_files': ['a.md', 'b.md'], 'is_clean': False}


@pytest.mark.asyncio
async def test_commit_stages_everything_first():
    runner = MockCommandRunner()
    runner.queue_output('')
    runner.queue_output('[main abc1234] Save\n 1 file changed, 1 insertion(+)\n')

    response = await git.commit(CommitRequest(message='Save'), repo=_repo(runner))

    assert [call['cmd'][1] for call in runner.calls] == ['add', 'commit']
    assert response.data['commit'] == 'abc1234'
    assert response.data['summary'] == {'changes': 1, 'insertions': 1, 'deletions': 0}


@pytest.mark.asyncio
async def test_commit_requires_message():
    runner = MockCommandRunner()

    with pytest.raises(HTTPException) as exc:
        await git.commit(CommitRequest(message='  '), repo=_repo(runner))

    assert exc.value.status_code == 400
    assert runner.calls == []


@pytest.mark.asyncio
async def test_git_failure_maps_to_generic_500():
    runner = MockCommandRunner()
    runner.queue_output('', exit_code=128, stderr='fatal: /secret/path/.git/index.lock exists')

    with pytest.raises(HTTPException) as exc:
        await git.stage(repo=_repo(runner))

    assert exc.value.status_code == 500
    assert exc.value.detail == 'Failed to stage changes'


@pytest.mark.asyncio
async def test_switch_branch_with_pending_changes_is_409():
    runner = MockCommandRunner()
    runner.queue_output(' M a.md\0')

    with pytest.raises(HTTPException) as exc:
        await git.switch_branch(SwitchBranchRequest(branch_name='feature'), repo=_repo(runner))

    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_switch_branch_rejects_option_like_names():
    with pytest.raises(HTTPException) as exc:
        await git.switch_branch(SwitchBranchRequest(branch_name='--orphan'), repo=_repo(MockCommandRunner()))

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_history_validates_file_path():
    with pytest.raises(HTTPException) as exc:
        await git.history(file_path='../outside.md', repo=_repo(MockCommandRunner()))

    assert exc.value.status_code == 400
    assert exc.value.detail == 'Path traversal not allowed'


@pytest.mark.asyncio
async def test_revert_runs_reset_and_clean():
    runner = MockCommandRunner()

    response = await git.revert(repo=_repo(runner))

    assert response.message == 'Changes reverted successfully'
    assert [call['cmd'][1] for call in runner.calls] == ['reset', 'clean']


@pytest.mark.asyncio
async def test_dependency_rejects_non_repository(monkeypatch, tmp_path):
    monkeypatch.setattr(deps.settings, 'use_mock_api', False)
    resolver = StaticRepositoryResolver([RepositoryConfig('1', 'Docs', str(tmp_path))])
    monkeypatch.setattr(deps, 'GitRepository', lambda root, timeout=None: _repo_with_answer(root, 'false\n'))

    with pytest.raises(HTTPException) as exc:
        await deps.get_git_repository(repo_id='1', resolver=resolver)

    assert exc.value.status_code == 400
    assert exc.value.detail == 'Not a git repository'


@pytest.mark.asyncio
async def test_dependency_returns_repository_bound_to_root(monkeypatch, tmp_path):
    monkeypatch.setattr(deps.settings, 'use_mock_api', False)
    resolver = StaticRepositoryResolver([RepositoryConfig('1', 'Docs', str(tmp_path))])
    monkeypatch.setattr(deps, 'GitRepository', lambda root, timeout=None: _repo_with_answer(root, 'true\n'))

    repo = await deps.get_git_repository(repo_id='1', resolver=resolver)

    assert repo.root == str(tmp_path)


def _repo_with_answer(root: str, answer: str) -> GitRepository:
    runner = MockCommandRunner()
    runner.queue_output(answer)
    return GitRepository(root, runner=runner)
