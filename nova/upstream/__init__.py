"""Upstream conversational backend integration."""
from nova.upstream.gateway import UpstreamGateway, RESPONSE_CONFIG
from nova.upstream.models import StepKind, UpstreamStep, translate_steps, steps_from_wire
from nova.upstream.payload import SERVICES_DELIMITER, compose_payload
from nova.upstream.transcripts import TranscriptSink

__all__ = [
    "UpstreamGateway",
    "RESPONSE_CONFIG",
    "StepKind",
    "UpstreamStep",
    "translate_steps",
    "steps_from_wire",
    "SERVICES_DELIMITER",
    "compose_payload",
    "TranscriptSink",
]
