"""Typed upstream steps.

Raw upstream records look like ``{"type": "text", "payload": {"message": ...}}``.
Only text-like and visual steps survive translation; every other kind
(control, debug, choice, ...) is dropped. Order is preserved.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nova.normalization.references import TEXT_STEP_TYPES


class StepKind(str, Enum):
    TEXT = "text"
    VISUAL = "visual"


class UpstreamStep(BaseModel):
    """One assistant output unit in upstream order."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: StepKind
    message: Optional[str] = None
    image_ref: Optional[str] = Field(default=None, alias="imageRef")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def translate_step(record: Any) -> Optional[UpstreamStep]:
    """Translate one raw record, or return None for kinds we drop."""
    if not isinstance(record, dict):
        return None
    payload = record.get("payload")
    if not isinstance(payload, dict):
        return None

    step_type = record.get("type")
    if step_type in TEXT_STEP_TYPES:
        message = payload.get("message")
        if isinstance(message, str) and message:
            return UpstreamStep(kind=StepKind.TEXT, message=message)
        return None
    if step_type == StepKind.VISUAL.value:
        image = payload.get("image")
        if isinstance(image, str) and image:
            return UpstreamStep(kind=StepKind.VISUAL, image_ref=image)
    return None


def translate_steps(records: Iterable[Any]) -> List[UpstreamStep]:
    steps = []
    for record in records:
        step = translate_step(record)
        if step is not None:
            steps.append(step)
    return steps


def steps_from_wire(items: Iterable[Dict[str, Any]]) -> List[UpstreamStep]:
    """Parse the ``steps`` list of an HTTP response body, skipping unknown kinds."""
    steps = []
    for item in items:
        if isinstance(item, dict) and item.get("kind") in (StepKind.TEXT.value, StepKind.VISUAL.value):
            steps.append(UpstreamStep.model_validate(item))
    return steps
