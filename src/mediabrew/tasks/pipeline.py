"""Task pipeline: run a workflow's conditional tasks over generation data.

For each task the pipeline evaluates the task's condition against the data
sources ``data``, ``generationData`` and ``value``, which all point at the
same generation data.  If the condition holds, it performs the task's
action.  The template engine and condition evaluator do the real work.  The
pipeline mostly dispatches and applies the failure policy.

Failure policy
--------------
- ``process`` tasks: errors propagate as :class:`TaskError`.
- ``prompt`` tasks (with ``tolerate_prompt_failures``): the error is
  recorded as a warning, a fallback text is stored if the destination is
  empty, and the run continues.
- Everything else: errors propagate as :class:`TaskError`.

Example:

    >>> pipeline = TaskPipeline()
    >>> data = {"tags": ["Misty", "Forest"], "seed": 7}
    >>> result = pipeline.run(
    ...     [{"template": "{{tags|snakecase}}_{{seed}}", "to": "name"}],
    ...     data,
    ... )
    >>> data["name"]
    'Misty_Forest_7'
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from mediabrew.conditions import evaluate_condition
from mediabrew.templates import render_template

from .models import TaskConfig
from .processors import ProcessorContext, ProcessorRegistry, processor_registry

logger = logging.getLogger(__name__)

ModelInvoker = Callable[[str, str, dict[str, Any]], Any]

FALLBACK_DESCRIPTION = "Image analysis unavailable"
FALLBACK_CONTENT = "Generated Content"


class TaskError(RuntimeError):
    """Raised when a task cannot be parsed or its action fails."""


@dataclass
class TaskRunResult:
    """Outcome of a pipeline run.

    Attributes:
        executed: Labels of tasks whose action ran.
        skipped: Labels of tasks skipped because their condition was false.
        warnings: Non-fatal failures (prompt tasks that fell back).
    """

    executed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def condition_sources(data: dict[str, Any]) -> dict[str, Any]:
    """Build the data sources a task condition is evaluated against."""
    return {"data": data, "generationData": data, "value": data}


def parse_task(task: TaskConfig | dict[str, Any]) -> TaskConfig:
    """Validate a raw task dict into a :class:`TaskConfig`.

    Raises:
        TaskError: If the task has no valid action.
    """
    if isinstance(task, TaskConfig):
        return task
    try:
        return TaskConfig.model_validate(task)
    except ValidationError as e:
        raise TaskError(f"Invalid task definition: {e}") from e


class TaskPipeline:
    """Run conditional tasks over a generation data dict.

    Args:
        processors: Registry to resolve ``process`` names from.
        model_invoker: Callable ``(model, prompt, data) -> reply`` used by
            prompt tasks.  If it is ``None``, prompt tasks fail.
        tolerate_prompt_failures: Record failed prompt tasks as warnings
            instead of aborting (post-generation behaviour).
    """

    def __init__(
        self,
        processors: ProcessorRegistry | None = None,
        model_invoker: ModelInvoker | None = None,
        *,
        tolerate_prompt_failures: bool = True,
    ) -> None:
        self._processors = processors if processors is not None else processor_registry
        self._model_invoker = model_invoker
        self._tolerate_prompt_failures = tolerate_prompt_failures

    def should_run(self, task: TaskConfig, data: dict[str, Any]) -> bool:
        """Evaluate a task's condition against the generation data."""
        if task.condition is None:
            return True
        return evaluate_condition(task.condition, condition_sources(data))

    def run(
        self,
        tasks: Iterable[TaskConfig | dict[str, Any]],
        data: dict[str, Any],
        context: ProcessorContext | None = None,
    ) -> TaskRunResult:
        """Run every task in order, mutating ``data`` in place.

        Args:
            tasks: Task configs or raw task dicts.
            data: Generation data the tasks read from and write to.
            context: Processor context.  Required only by ``process`` tasks.

        Returns:
            :class:`TaskRunResult` summarizing the run.

        Raises:
            TaskError: On an invalid task or a failed non-tolerated action.
        """
        result = TaskRunResult()

        for raw_task in tasks:
            task = parse_task(raw_task)

            if not self.should_run(task, data):
                logger.info(f"Skipping task '{task.label}' due to unmet condition")
                result.skipped.append(task.label)
                continue

            try:
                self.run_task(task, data, context)
            except TaskError as e:
                if task.kind == "prompt" and self._tolerate_prompt_failures:
                    self._apply_prompt_fallback(task, data, e, result)
                    continue
                raise

            result.executed.append(task.label)

        return result

    def run_task(
        self,
        task: TaskConfig,
        data: dict[str, Any],
        context: ProcessorContext | None = None,
    ) -> None:
        """Perform a single task's action, ignoring its condition.

        Raises:
            TaskError: If the action fails.
        """
        kind = task.kind
        try:
            if kind == "process":
                self._run_process(task, data, context)
            elif kind == "prompt":
                self._run_prompt(task, data)
            elif kind == "math":
                data[task.to] = self._run_math(task, data)
            elif kind == "copy":
                self._run_copy(task, data)
            elif kind == "template":
                data[task.to] = render_template(task.template, data)
                logger.info(f"Stored template result in {task.to}: {data[task.to]}")
            else:
                data[task.to] = task.value
        except TaskError:
            raise
        except Exception as e:
            raise TaskError(f"Task '{task.label}' failed: {e}") from e

    def _run_process(
        self,
        task: TaskConfig,
        data: dict[str, Any],
        context: ProcessorContext | None,
    ) -> None:
        processor = self._processors.get(task.process)
        if processor is None:
            raise TaskError(f"Unknown process handler: {task.process}")
        if context is None:
            raise TaskError(f"Process '{task.process}' requires a processor context")

        logger.info(f"Running processor: {task.label}")
        processor(task.parameters, data, context)

    def _run_prompt(self, task: TaskConfig, data: dict[str, Any]) -> None:
        if self._model_invoker is None:
            raise TaskError(f"Prompt task for '{task.to}' requires a model invoker")

        prompt = render_template(task.prompt, data)
        logger.info(f"Processing prompt for {task.to} with model {task.model}")
        data[task.to] = self._model_invoker(task.model, prompt, data)

    def _run_math(self, task: TaskConfig, data: dict[str, Any]) -> float | int:
        value = float(data.get(task.from_))
        for step in task.math or []:
            value = (value + step.offset) * step.scale + step.bias
            if step.round == "floor":
                value = math.floor(value)
            elif step.round == "ceil":
                value = math.ceil(value)
        return value

    def _run_copy(self, task: TaskConfig, data: dict[str, Any]) -> None:
        source = data.get(task.from_)
        if source is None or source == "":
            raise TaskError(
                f'Task for "{task.to}": source field "{task.from_}" not found, empty, or undefined'
            )
        logger.info(f"Copying value from {task.from_} to {task.to}")
        data[task.to] = source

    def _apply_prompt_fallback(
        self,
        task: TaskConfig,
        data: dict[str, Any],
        error: TaskError,
        result: TaskRunResult,
    ) -> None:
        logger.warning(f"Failed to process prompt for {task.to}: {error}")
        result.warnings.append(f"Failed to generate {task.to}: {error}")
        if not data.get(task.to):
            data[task.to] = FALLBACK_DESCRIPTION if task.to == "description" else FALLBACK_CONTENT
