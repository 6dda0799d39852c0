from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .system_cmd import CommandResult, CommandRunner, RealCommandRunner, shell_preview

logger = logging.getLogger(__name__)

_GIT_ENV = {'GIT_TERMINAL_PROMPT': '0', 'LC_ALL': 'C'}
# upper bound on git processes one history request runs at once
MAX_CONCURRENT_PROCESSES = 5

_FIELD_SEP = '\x1f'
_RECORD_SEP = '\x1e'
_LOG_FORMAT = f'--format=%H{_FIELD_SEP}%an{_FIELD_SEP}%aI{_FIELD_SEP}%s{_RECORD_SEP}'

_COMMIT_HEADER = re.compile(r'^\[(?P<branch>[^\s\]]+)(?: \([^)]*\))? (?P<hash>[0-9a-f]+)\]', re.MULTILINE)
_FILES_CHANGED = re.compile(r'(\d+) files? changed')
_INSERTIONS = re.compile(r'(\d+) insertions?\(\+\)')
_DELETIONS = re.compile(r'(\d+) deletions?\(-\)')


class GitCommandError(Exception):
    def __init__(self, cmd: list[str], result: CommandResult):
        self.cmd = cmd
        self.result = result
        super().__init__(f'{shell_preview(cmd)} failed ({result.exit_code}): {result.stderr}')


class NotAGitRepository(Exception):
    pass


class PendingChangesError(Exception):
    pass


@dataclass(frozen=True)
class GitStatus:
    modified: list[str] = field(default_factory=list)
    not_added: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def modified_files(self) -> list[str]:
        ordered = [*self.modified, *self.not_added, *self.created, *self.deleted, *(to for _, to in self.renamed)]
        return list(dict.fromkeys(ordered))

    @property
    def is_clean(self) -> bool:
        return not self.modified_files


@dataclass(frozen=True)
class CommitSummary:
    commit: str
    branch: str
    changes: int = 0
    insertions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict:
        return {
            'commit': self.commit,
            'branch': self.branch,
            'summary': {'changes': self.changes, 'insertions': self.insertions, 'deletions': self.deletions},
        }


@dataclass(frozen=True)
class LogEntry:
    hash: str
    author: str
    date: str
    message: str


@dataclass(frozen=True)
class BranchInfo:
    name: str
    is_current: bool


@dataclass(frozen=True)
class FileChangeStats:
    insertions: int = 0
    deletions: int = 0
    total_files_changed: int = 0


def parse_status(porcelain_z: str) -> GitStatus:
    """Parse ``git status --porcelain -z`` output."""
    status = GitStatus()
    tokens = porcelain_z.split('\0')
    i = 0
    while i < len(tokens):
        entry = tokens[i]
        i += 1
        if len(entry) < 4:
            continue
        xy, path = entry[:2], entry[3:]

        if xy == '??':
            status.not_added.append(path)
        elif xy[0] in 'RC':
            orig_path = tokens[i] if i < len(tokens) else ''
            i += 1
            if xy[0] == 'R':
                status.renamed.append((orig_path, path))
            else:
                status.created.append(path)
        elif xy[0] == 'A':
            status.created.append(path)
        elif 'D' in xy:
            status.deleted.append(path)
        elif 'M' in xy or 'T' in xy or 'U' in xy:
            status.modified.append(path)
    return status


def parse_commit_output(output: str) -> CommitSummary:
    header = _COMMIT_HEADER.search(output)
    return CommitSummary(
        commit=header.group('hash') if header else '',
        branch=header.group('branch') if header else '',
        changes=_first_int(_FILES_CHANGED, output),
        insertions=_first_int(_INSERTIONS, output),
        deletions=_first_int(_DELETIONS, output),
    )


def parse_stat_output(output: str) -> FileChangeStats:
    return FileChangeStats(
        insertions=_first_int(_INSERTIONS, output),
        deletions=_first_int(_DELETIONS, output),
        total_files_changed=_first_int(_FILES_CHANGED, output),
    )


def parse_log(output: str) -> list[LogEntry]:
    entries: list[LogEntry] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip('\n')
        if not record:
            continue
        parts = record.split(_FIELD_SEP)
        if len(parts) != 4:
            continue
        entries.append(LogEntry(hash=parts[0], author=parts[1], date=parts[2], message=parts[3]))
    return entries


def _first_int(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


class GitRepository:
    """Repository-state provider for one working copy, driven through the git CLI."""

    def __init__(self, root: str, runner: Optional[CommandRunner] = None, timeout: Optional[int] = None):
        self.root = root
        self.runner = runner or RealCommandRunner(extra_env=_GIT_ENV)
        self.timeout = timeout

    async def _git(self, *args: str) -> CommandResult:
        cmd = ['git', *args]
        result = await self.runner.run(cmd, cwd=self.root, timeout=self.timeout)
        if not result.success:
            raise GitCommandError(cmd, result)
        return result

    async def is_repo(self) -> bool:
        try:
            result = await self._git('rev-parse', '--is-inside-work-tree')
        except GitCommandError:
            return False
        return result.stdout.strip() == 'true'

    async def ensure_repo(self) -> None:
        if not await self.is_repo():
            raise NotAGitRepository(self.root)

    async def status(self) -> GitStatus:
        result = await self._git('status', '--porcelain', '-z', '--untracked-files=all')
        return parse_status(result.stdout)

    async def add(self, path: str = '.') -> None:
        await self._git('add', '--', path)

    async def commit(self, message: str) -> CommitSummary:
        result = await self._git('commit', '-m', message)
        return parse_commit_output(result.stdout)

    async def checkout(self, branch: str) -> None:
        await self._git('checkout', branch)

    async def reset(self, mode: str = 'hard') -> None:
        await self._git('reset', f'--{mode}')

    async def clean(self, flags: str = 'fd') -> None:
        await self._git('clean', f'-{flags}')

    async def log(self, file: Optional[str] = None) -> list[LogEntry]:
        args = ['log', _LOG_FORMAT]
        if file:
            args += ['--', file]
        result = await self._git(*args)
        return parse_log(result.stdout)

    async def show(self, args: list[str]) -> str:
        result = await self._git('show', *args)
        return result.stdout

    async def branches(self) -> list[BranchInfo]:
        result = await self._git('branch', '--list', '--format=%(HEAD)%(refname:short)')
        out: list[BranchInfo] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            out.append(BranchInfo(name=line[1:].strip(), is_current=line.startswith('*')))
        return out

    async def revert_all(self) -> None:
        """Discard every tracked change and remove untracked files and directories."""
        await self.reset('hard')
        await self.clean('fd')

    async def switch_branch(self, branch: str) -> None:
        status = await self.status()
        if not status.is_clean:
            raise PendingChangesError(
                'Pending changes detected. Please commit or stash them before switching branches.'
            )
        await self.checkout(branch)

    async def file_history(self, file_path: str) -> list[dict]:
        entries = await self.log(file_path)
        limit = asyncio.Semaphore(MAX_CONCURRENT_PROCESSES)

        async def bounded(commit_hash: str) -> FileChangeStats:
            async with limit:
                return await self._commit_stats(commit_hash, file_path)

        stats = await asyncio.gather(*(bounded(entry.hash) for entry in entries))
        return [
            {
                'hash': entry.hash,
                'message': entry.message,
                'author': entry.author,
                'date': entry.date,
                'changes': {
                    'insertions': stat.insertions,
                    'deletions': stat.deletions,
                    'total_files_changed': stat.total_files_changed,
                },
            }
            for entry, stat in zip(entries, stats)
        ]

    async def _commit_stats(self, commit_hash: str, file_path: str) -> FileChangeStats:
        try:
            output = await self.show([commit_hash, '--stat=1000', '--oneline', '--', file_path])
        except GitCommandError as exc:
            logger.warning('Could not read stats for commit %s: %s', commit_hash, exc)
            return FileChangeStats()
        return parse_stat_output(output)
