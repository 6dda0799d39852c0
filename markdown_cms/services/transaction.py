from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionStep:
    name: str
    action: Callable[[], None]
    rollback: Callable[[], None] | None = None


class TransactionRunner:
    """Runs filesystem steps in order and undoes completed ones if a later step raises.

    The failing step's exception is re-raised after rollback so the caller
    decides how to report it.
    """

    def __init__(self):
        self._steps: list[TransactionStep] = []

    def add_step(self, step: TransactionStep) -> None:
        self._steps.append(step)

    def execute(self) -> None:
        completed: list[TransactionStep] = []
        for step in self._steps:
            try:
                step.action()
            except Exception:
                logger.warning('Step %r failed, rolling back %d step(s)', step.name, len(completed))
                self._rollback(completed)
                raise
            completed.append(step)

    def _rollback(self, completed: list[TransactionStep]) -> None:
        for step in reversed(completed):
            if not step.rollback:
                continue
            try:
                step.rollback()
            except Exception:
                logger.exception('Rollback of step %r failed', step.name)
