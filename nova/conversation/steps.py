"""Translate normalized upstream steps into conversation entries."""

from typing import Iterable, List, Optional

from nova.conversation.models import ConversationEntry, Origin
from nova.normalization import split_canonical_reference
from nova.upstream.models import StepKind, UpstreamStep


def entry_from_step(step: UpstreamStep) -> Optional[ConversationEntry]:
    if step.kind == StepKind.VISUAL:
        if not step.image_ref:
            return None
        return ConversationEntry(origin=Origin.ASSISTANT, image_ref=step.image_ref)

    if not step.message:
        return None
    # A document reference becomes a preview field; the tag never reaches display text.
    text, document_id = split_canonical_reference(step.message)
    return ConversationEntry(origin=Origin.ASSISTANT, text=text, document_id=document_id)


def entries_from_steps(steps: Iterable[UpstreamStep]) -> List[ConversationEntry]:
    """One entry per usable step, in upstream order."""
    entries = []
    for step in steps:
        entry = entry_from_step(step)
        if entry is not None:
            entries.append(entry)
    return entries
