"""Named post-generation processors and their registry.

A processor is a plain callable ``(parameters, data, context) -> None``.  It
mutates ``data``, the media item's generation data, in place.  Workflow
configs refer to processors by name:

    {"process": "extractOutputTexts", "parameters": {"properties": ["summary"]}}

Example registration:

    >>> from mediabrew.tasks.processors import processor_registry
    >>>
    >>> @processor_registry.register("stampSeed")
    ... def stamp_seed(parameters, data, context):
    ...     data["seedLabel"] = f"seed-{data.get('seed')}"
"""

from __future__ import annotations

import logging
import random
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

WorkflowRunner = Callable[[str, dict[str, Any]], dict[str, Any] | None]

# Fields filled with "" when a nested workflow request does not set them
NESTED_REQUIRED_FIELDS = ("tags", "prompt", "description", "summary", "name")

# Metadata carried alongside each mapped media input
IMAGE_METADATA_FIELDS = ("description", "summary", "tags", "name", "uid", "imageFormat")
AUDIO_METADATA_FIELDS = ("description", "summary", "tags", "name", "uid")

MAX_SEED = 4294967294


@dataclass
class ProcessorContext:
    """Execution context handed to every processor.

    Attributes:
        storage_dir: Directory where generated media and side files live.
        save_image_path: Final destination of the generated image, if any.
        workflow_runner: Callable running a nested workflow by name.  It
            returns the nested generation data.
    """

    storage_dir: Path
    save_image_path: Path | None = None
    workflow_runner: WorkflowRunner | None = None


Processor = Callable[[dict[str, Any], dict[str, Any], ProcessorContext], None]


class ProcessorRegistry:
    """Registry for managing available processors."""

    def __init__(self):
        self._processors: dict[str, Processor] = {}

    def register(self, name: str, processor: Processor | None = None):
        """Register a processor under a name.

        Can be called directly or used as a decorator:

            registry.register("name", func)

            @registry.register("name")
            def func(parameters, data, context): ...

        Args:
            name: Name used in task ``process`` fields.
            processor: Callable to register.  Omit it to get a decorator.

        Returns:
            The processor (direct call) or a decorator.
        """

        def decorator(func: Processor) -> Processor:
            self._processors[name] = func
            logger.info(f"Registered processor: {name}")
            return func

        if processor is not None:
            return decorator(processor)
        return decorator

    def get(self, name: str) -> Processor | None:
        """Look up a processor by name."""
        return self._processors.get(name)

    def list_available(self) -> list[str]:
        """List all registered processor names."""
        return list(self._processors.keys())


# Global processor registry
processor_registry = ProcessorRegistry()


def read_output_text(filename: str, storage_dir: Path) -> str:
    """Read a side file written next to the generated media.

    Args:
        filename: File name relative to ``storage_dir``, or an absolute path.
        storage_dir: Storage directory.

    Returns:
        Stripped file contents.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(filename)
    if not path.is_absolute():
        path = storage_dir / path
    return path.read_text(encoding="utf-8").strip()


@processor_registry.register("extractOutputTexts")
def extract_output_texts(
    parameters: dict[str, Any], data: dict[str, Any], context: ProcessorContext
) -> None:
    """Copy ``<name>.txt`` contents into ``data[name]`` for each listed property.

    Raises:
        ValueError: If ``properties`` is not a list.
        FileNotFoundError: If any text file is missing.
    """
    properties = parameters.get("properties")
    if not isinstance(properties, list):
        raise ValueError('extractOutputTexts requires "properties" parameter as list')

    logger.info(f"Extracting text content from {len(properties)} file(s)")
    for property_name in properties:
        text = read_output_text(f"{property_name}.txt", context.storage_dir)
        data[property_name] = text
        preview = text[:100] + ("..." if len(text) > 100 else "")
        logger.info(f"Extracted '{property_name}': {preview}")


@processor_registry.register("extractOutputMediaFromTextFile")
def extract_output_media(
    parameters: dict[str, Any], data: dict[str, Any], context: ProcessorContext
) -> None:
    """Copy the media file named inside a text file to the final save path.

    The referenced path's extension is replaced with ``data["imageFormat"]``.

    Raises:
        ValueError: If ``filename``, ``imageFormat`` or the save path is missing.
        FileNotFoundError: If the referenced media file does not exist.
    """
    filename = parameters.get("filename")
    if not filename:
        raise ValueError('extractOutputMediaFromTextFile requires "filename" parameter')

    image_format = data.get("imageFormat")
    if not image_format:
        raise ValueError("imageFormat is required to determine output file extension")
    if context.save_image_path is None:
        raise ValueError("extractOutputMediaFromTextFile requires a save image path")

    output_path = Path(read_output_text(filename, context.storage_dir))
    output_path = output_path.with_suffix(f".{image_format}")
    logger.info(f"Extracted output path: {output_path}")

    if not output_path.exists():
        raise FileNotFoundError(f"Output file not found at extracted path: {output_path}")

    shutil.copyfile(output_path, context.save_image_path)
    logger.info(f"Copied {output_path} to {context.save_image_path}")


def _map_media_input(
    nested: dict[str, Any],
    data: dict[str, Any],
    *,
    kind: str,
    source_key: str,
    media_index: Any,
) -> None:
    generated_key = "saveImagePath" if kind == "image" else "saveAudioPath"
    key = generated_key if source_key == "generated" else source_key
    media_path = data.get(key)
    if not media_path:
        return

    filename_key = f"image_{media_index}_filename" if kind == "image" else f"audio_{media_index}"
    nested[filename_key] = Path(media_path).name
    nested[f"{kind}_{media_index}_path"] = str(media_path)

    fields = IMAGE_METADATA_FIELDS if kind == "image" else AUDIO_METADATA_FIELDS
    for field_name in fields:
        source_field = field_name if key == generated_key else f"{key}_{field_name}"
        if source_field in data:
            nested[f"{kind}_{media_index}_{field_name}"] = data[source_field]


@processor_registry.register("executeWorkflow")
def execute_workflow(
    parameters: dict[str, Any], data: dict[str, Any], context: ProcessorContext
) -> None:
    """Run a nested workflow and map its results back into ``data``.

    ``inputMapping`` rules copy ``from`` to ``to`` into the nested request.
    They can also map a media input (``image``/``audio`` +
    ``toMediaInput``), passing along its local path and metadata.
    ``outputMapping`` rules copy nested results back.  New media URLs from
    the nested run replace the parent's.

    Raises:
        ValueError: If ``workflow`` is missing.
        RuntimeError: If no runner is configured or the nested run fails.
    """
    workflow_name = parameters.get("workflow")
    if not workflow_name:
        raise ValueError('executeWorkflow requires "workflow" parameter')
    if context.workflow_runner is None:
        raise RuntimeError("executeWorkflow requires a workflow runner in the processor context")

    input_mapping = parameters.get("inputMapping") or []
    output_mapping = parameters.get("outputMapping") or []

    nested: dict[str, Any] = {
        "workflow": workflow_name,
        "seed": random.randint(0, MAX_SEED),
    }

    for mapping in input_mapping:
        if mapping.get("from") and mapping.get("to"):
            if mapping["from"] in data:
                nested[mapping["to"]] = data[mapping["from"]]
        elif mapping.get("image") and mapping.get("toMediaInput") is not None:
            _map_media_input(
                nested,
                data,
                kind="image",
                source_key=mapping["image"],
                media_index=mapping["toMediaInput"],
            )
        elif mapping.get("audio") and mapping.get("toMediaInput") is not None:
            _map_media_input(
                nested,
                data,
                kind="audio",
                source_key=mapping["audio"],
                media_index=mapping["toMediaInput"],
            )

    for field_name in NESTED_REQUIRED_FIELDS:
        if nested.get(field_name) is None:
            nested[field_name] = ""

    logger.info(f"Executing nested workflow '{workflow_name}' with {len(nested)} fields")

    try:
        result = context.workflow_runner(workflow_name, nested)
        if not result:
            raise RuntimeError("Nested workflow did not produce a result")
    except Exception as e:
        raise RuntimeError(f'Nested workflow "{workflow_name}" failed: {e}') from e

    for mapping in output_mapping:
        if mapping.get("from") and mapping.get("to") and mapping["from"] in result:
            data[mapping["to"]] = result[mapping["from"]]

    if result.get("imageUrl"):
        data["imageUrl"] = result["imageUrl"]
        data["saveImagePath"] = result.get("saveImagePath")
    if result.get("audioUrl"):
        data["audioUrl"] = result["audioUrl"]
        data["saveAudioPath"] = result.get("saveAudioPath")

    logger.info(f"Nested workflow '{workflow_name}' completed")
