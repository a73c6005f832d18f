"""Line transform hooks.

This module provides built-in record-to-document transforms and loads
user-provided ones. A transform returns Accepted(document) or SKIPPED.
"""

from __future__ import annotations

import importlib
import importlib.util
import json
from pathlib import Path
from typing import Any, cast

from core.constants import BUILTIN_TRANSFORM_NAMES
from core.errors import LineportTransformError
from core.types import (
    SKIPPED,
    Accepted,
    LineTransform,
    RecordContext,
    Skipped,
    TransformResult,
)


def plain_text_document(record: RecordContext) -> TransformResult:
    """Persist every line as a text document keyed by its record id."""
    document = {"_id": record.record_id, **record.as_payload()}
    return Accepted(document)


def json_line_document(record: RecordContext) -> TransformResult:
    """Persist each line as a parsed JSON object keyed by its record id.

    Blank lines are skipped. The record id overrides any ``_id`` field.

    Raises:
        LineportTransformError: If the line is not a JSON object.
    """
    if not record.text.strip():
        return SKIPPED
    try:
        payload = json.loads(record.text)
    except json.JSONDecodeError as error:
        raise LineportTransformError(
            f"Failed to parse JSON line at {record.filename}:{record.line_number}: "
            f"{error.msg}. Fix the JSON syntax and retry the import."
        ) from error
    if not isinstance(payload, dict):
        raise LineportTransformError(
            f"Invalid JSON line at {record.filename}:{record.line_number}: "
            f"expected an object, got {type(payload).__name__}."
        )
    return Accepted({**payload, "_id": record.record_id})


_BUILTIN_TRANSFORMS: dict[str, LineTransform] = {
    "text": plain_text_document,
    "json": json_line_document,
}


def load_line_transform(transform_ref: str | None) -> LineTransform:
    """Resolve a transform reference into a callable.

    Args:
        transform_ref: None for plain text, a built-in name,
            ``package.module:function``, or ``path/to/file.py:function``.

    Returns:
        Transform callable.

    Raises:
        LineportTransformError: If the reference cannot be resolved.
    """
    if transform_ref is None:
        return plain_text_document
    if transform_ref in _BUILTIN_TRANSFORMS:
        return _BUILTIN_TRANSFORMS[transform_ref]
    module_ref, separator, attribute = transform_ref.rpartition(":")
    if not separator or not module_ref or not attribute:
        raise LineportTransformError(
            f"Invalid transform reference '{transform_ref}'. Use one of "
            f"{', '.join(BUILTIN_TRANSFORM_NAMES)}, 'module:function', or 'file.py:function'."
        )
    if module_ref.endswith(".py"):
        module = _load_python_file(Path(module_ref).expanduser().resolve())
    else:
        module = _import_module(module_ref)
    transform = getattr(module, attribute, None)
    if transform is None or not callable(transform):
        raise LineportTransformError(
            f"Invalid transform reference '{transform_ref}': "
            f"missing callable {attribute}(record)."
        )
    return cast(LineTransform, transform)


def apply_transform(transform: LineTransform, record: RecordContext) -> TransformResult:
    """Run a transform and validate its result.

    Args:
        transform: Transform callable.
        record: Record for the current line.

    Returns:
        Accepted or Skipped result.

    Raises:
        LineportTransformError: If the transform raises or returns another type.
    """
    try:
        result = transform(record)
    except LineportTransformError:
        raise
    except Exception as error:
        raise LineportTransformError(
            f"Line transform failed at {record.filename}:{record.line_number}: {error}"
        ) from error
    if not isinstance(result, (Accepted, Skipped)):
        raise LineportTransformError(
            f"Invalid transform result at {record.filename}:{record.line_number}: "
            f"expected Accepted or SKIPPED, got {type(result).__name__}."
        )
    return result


def _import_module(module_name: str) -> Any:
    """Import a transform module by dotted name."""
    try:
        return importlib.import_module(module_name)
    except ImportError as error:
        raise LineportTransformError(
            f"Failed to import transform module '{module_name}': {error}."
        ) from error


def _load_python_file(module_path: Path) -> Any:
    """Load a transform module from a file path."""
    if not module_path.exists():
        raise LineportTransformError(
            f"Transform file not found at {module_path}. Provide a valid --transform path."
        )
    spec = importlib.util.spec_from_file_location("lineport_user_transform", str(module_path))
    if spec is None or spec.loader is None:
        raise LineportTransformError(
            f"Failed to load transform module at {module_path}. Verify the file path and syntax."
        )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
