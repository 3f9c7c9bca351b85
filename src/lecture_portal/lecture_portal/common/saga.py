"""Ordered multi-step writes with compensating undo actions.

The store has no transactions, so workflows that create several dependent
rows (a branch, its HOD profile and the HOD role) register each step
together with the action that undoes it. When a step fails the undo actions
of the steps that already succeeded run in reverse order and the original
error is re-raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class SagaStep:
    name: str
    action: Callable[[dict], Any]
    compensate: Optional[Callable[[dict, Any], None]] = None


@dataclass
class Saga:
    name: str
    steps: list[SagaStep] = field(default_factory=list)

    def step(
        self,
        name: str,
        action: Callable[[dict], Any],
        compensate: Optional[Callable[[dict, Any], None]] = None,
    ) -> "Saga":
        self.steps.append(SagaStep(name=name, action=action, compensate=compensate))
        return self

    def run(self) -> dict:
        """Run every step; results are collected by step name.

        Each action receives the results gathered so far.
        """
        results: dict[str, Any] = {}
        done: list[SagaStep] = []

        for step in self.steps:
            try:
                results[step.name] = step.action(results)
            except Exception:
                logger.warning("%s: step %r failed, compensating %d step(s)", self.name, step.name, len(done))
                self._compensate(done, results)
                raise
            done.append(step)

        return results

    def _compensate(self, done: list[SagaStep], results: dict) -> None:
        for step in reversed(done):
            if step.compensate is None:
                continue
            try:
                step.compensate(results, results.get(step.name))
            except Exception:
                # The original failure is what the caller sees.
                logger.error("%s: undo of step %r failed", self.name, step.name, exc_info=True)
