from __future__ import annotations

import pytest

from markdown_cms.services.system_cmd import CommandResult, MockCommandRunner, RealCommandRunner, shell_preview


@pytest.mark.asyncio
async def test_real_runner_captures_stdout_verbatim():
    result = await RealCommandRunner().run(['printf', ' M a.md\\n'])

    assert result.success is True
    assert result.exit_code == 0
    assert result.stdout == ' M a.md\n'


@pytest.mark.asyncio
async def test_real_runner_uses_cwd(tmp_path):
    result = await RealCommandRunner().run(['ls'], cwd=str(tmp_path))
    (tmp_path / 'marker.md').write_text('x', encoding='utf-8')
    second = await RealCommandRunner().run(['ls'], cwd=str(tmp_path))

    assert result.stdout == ''
    assert second.stdout.strip() == 'marker.md'


@pytest.mark.asyncio
async def test_real_runner_reports_missing_binary():
    result = await RealCommandRunner().run(['definitely-not-a-real-binary-xyz'])

    assert result.success is False
    assert result.exit_code == 127


@pytest.mark.asyncio
async def test_real_runner_times_out():
    result = await RealCommandRunner().run(['sleep', '5'], timeout=1)

    assert result.success is False
    assert result.exit_code == 124
    assert 'timed out' in result.stderr


@pytest.mark.asyncio
async def test_real_runner_passes_extra_env():
    result = await RealCommandRunner(extra_env={'CMS_MARKER': 'on'}).run(['sh', '-c', 'printf "$CMS_MARKER"'])

    assert result.stdout == 'on'


@pytest.mark.asyncio
async def test_mock_runner_records_calls_and_replays_queue():
    runner = MockCommandRunner()
    runner.queue_output('first')
    runner.queue_result(CommandResult(False, '', 'bad', 2, 0.0))

    one = await runner.run(['git', 'status'], cwd='/repo')
    two = await runner.run(['git', 'log'])
    three = await runner.run(['git', 'diff'])

    assert one.stdout == 'first'
    assert two.exit_code == 2
    assert three.success is True
    assert runner.calls[0] == {'cmd': ['git', 'status'], 'cwd': '/repo', 'timeout': None}


def test_shell_preview_quotes_arguments():
    assert shell_preview(['git', 'commit', '-m', 'fix typo']) == "git commit -m 'fix typo'"
