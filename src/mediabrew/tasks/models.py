"""Pydantic models for workflow task definitions.

Tasks are persisted as JSON in workflow and export configuration.  Each task
has an optional ``condition`` and exactly one action:

========================  ==========  ===========================================
Keys                      Kind        Effect
========================  ==========  ===========================================
``process``               process     Run a named processor with ``parameters``
``prompt`` + ``model``    prompt      Render the prompt, call the model, store
                                      the reply in ``to``
``math`` + ``from``       math        Apply offset/scale/bias/round steps
``from``                  copy        Copy ``data[from]`` into ``to``
``template``              template    Render the template into ``to``
``value``                 value       Store the literal ``value`` into ``to``
========================  ==========  ===========================================

The table order is also the order in which the keys are checked when a task
has several of them.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

TaskKind = Literal["process", "prompt", "math", "copy", "template", "value"]


class MathStep(BaseModel):
    """One arithmetic step: ``(value + offset) * scale + bias``, then round."""

    offset: float = Field(default=0.0, description="Added before scaling.")
    scale: float = Field(default=1.0, description="Multiplier.")
    bias: float = Field(default=0.0, description="Added after scaling.")
    round: Literal["none", "floor", "ceil"] = Field(
        default="none",
        description="Rounding applied after the step.",
    )


class TaskConfig(BaseModel):
    """A single pre/post-generation or export preparation task.

    Attributes:
        name: Optional display name used in logs and progress messages.
        condition: Optional AND/OR condition JSON gating the task.
        to: Destination field for every kind except ``process``.
        from_: Source field (JSON key ``from``) for copy and math tasks.
        template: Template string for template tasks.
        value: Literal for value tasks.
        prompt: Prompt template for model tasks.
        model: Model identifier passed to the model invoker.
        math: Arithmetic steps for math tasks.
        process: Processor name for process tasks.
        parameters: Keyword parameters handed to the processor.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, description="Display name for logs.")
    condition: dict[str, Any] | None = Field(
        default=None,
        description="AND/OR condition JSON; None means always run.",
    )
    to: str | None = Field(default=None, description="Destination field.")
    from_: str | None = Field(default=None, alias="from", description="Source field.")
    template: str | None = Field(default=None, description="Template to render.")
    value: Any = Field(default=None, description="Literal to store.")
    prompt: str | None = Field(default=None, description="Prompt template for the model.")
    model: str | None = Field(default=None, description="Model identifier.")
    math: list[MathStep] | None = Field(default=None, description="Arithmetic steps.")
    process: str | None = Field(default=None, description="Processor name.")
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Parameters passed to the processor.",
    )

    @property
    def kind(self) -> TaskKind:
        """Action this task performs."""
        if self.process is not None:
            return "process"
        if self.prompt is not None:
            return "prompt"
        if self.math is not None:
            return "math"
        if self.from_ is not None:
            return "copy"
        if self.template is not None:
            return "template"
        return "value"

    @property
    def label(self) -> str:
        """Human-readable identifier for log messages."""
        if self.name:
            return self.name
        if self.kind == "process":
            return f"process {self.process}"
        return f"{self.kind} to {self.to}"

    @model_validator(mode="after")
    def _check_action(self) -> TaskConfig:
        has_action = (
            self.process is not None
            or self.prompt is not None
            or self.math is not None
            or self.from_ is not None
            or self.template is not None
            or "value" in self.model_fields_set
        )
        if not has_action:
            raise ValueError(
                "Task must define one of: 'process', 'prompt', 'math', 'from', "
                "'template', or 'value'"
            )
        if self.kind != "process" and not self.to:
            raise ValueError(f"Task of kind '{self.kind}' is missing required 'to' field")
        if self.kind == "prompt" and not self.model:
            raise ValueError(f"Prompt task for '{self.to}' requires 'model'")
        if self.kind == "math" and not self.from_:
            raise ValueError(f"Math task for '{self.to}' requires 'from'")
        return self
