"""Workflow task pipeline.

Runs conditional pre/post-generation tasks (template fill, value copy, math,
model prompts and named processors) over a media item's generation data.
"""

from .models import MathStep, TaskConfig
from .pipeline import TaskError, TaskPipeline, TaskRunResult, condition_sources, parse_task
from .processors import ProcessorContext, ProcessorRegistry, processor_registry

__all__ = [
    "MathStep",
    "ProcessorContext",
    "ProcessorRegistry",
    "TaskConfig",
    "TaskError",
    "TaskPipeline",
    "TaskRunResult",
    "condition_sources",
    "parse_task",
    "processor_registry",
]
