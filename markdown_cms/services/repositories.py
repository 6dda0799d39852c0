from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from ..config import Settings

_MOCK_REPOSITORY_LABELS = ('Main Documentation', 'API Documentation', 'User Guides')


class RepositoryNotConfigured(LookupError):
    def __init__(self, repository_id: Optional[str], available: list[str]):
        self.repository_id = repository_id
        self.available = available
        if not repository_id:
            message = 'Repository ID is required'
        else:
            message = f"Repository with ID '{repository_id}' not found. Available repositories: {', '.join(available)}"
        super().__init__(message)


@dataclass(frozen=True)
class RepositoryConfig:
    id: str
    label: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {'id': self.id, 'label': self.label, 'path': self.path}


class RepositoryResolver(Protocol):
    def resolve(self, repository_id: Optional[str]) -> str:
        ...


def _numbered_entries(settings: Settings, environ: Mapping[str, str]) -> dict[str, str]:
    # .env values arrive as settings extras with lowercased keys; the process environment wins
    merged = {key.upper(): str(value) for key, value in (settings.model_extra or {}).items() if value is not None}
    merged.update(environ)
    return merged


def load_repositories(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> list[RepositoryConfig]:
    """Read ``MARKDOWN_ROOT_DIR_<n>`` / ``MARKDOWN_ROOT_LABEL_<n>`` pairs.

    Entries come from the process environment and from the settings .env file.
    Numbering starts at 1 and stops at the first missing directory. With no
    numbered entries the legacy ``markdown_root_dir`` becomes the single
    ``default`` repository. Mock mode always yields three repositories on the
    mock root.
    """
    if settings.use_mock_api:
        return [
            RepositoryConfig(id=str(index), label=label, path=settings.mock_root_dir)
            for index, label in enumerate(_MOCK_REPOSITORY_LABELS, start=1)
        ]

    env = _numbered_entries(settings, os.environ if environ is None else environ)
    repositories: list[RepositoryConfig] = []
    index = 1
    while True:
        path = env.get(f'MARKDOWN_ROOT_DIR_{index}')
        if not path:
            break
        label = env.get(f'MARKDOWN_ROOT_LABEL_{index}') or f'Repository {index}'
        repositories.append(RepositoryConfig(id=str(index), label=label, path=path))
        index += 1

    if not repositories:
        repositories.append(RepositoryConfig(id='default', label='Default Repository', path=settings.markdown_root_dir))
    return repositories


class StaticRepositoryResolver:
    def __init__(self, repositories: list[RepositoryConfig]):
        self.repositories = list(repositories)

    def get(self, repository_id: Optional[str]) -> RepositoryConfig:
        for repo in self.repositories:
            if repository_id and repo.id == repository_id:
                return repo
        raise RepositoryNotConfigured(repository_id, [repo.id for repo in self.repositories])

    def resolve(self, repository_id: Optional[str]) -> str:
        return self.get(repository_id).path


def resolver_from_settings(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> StaticRepositoryResolver:
    return StaticRepositoryResolver(load_repositories(settings, environ))
