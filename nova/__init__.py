"""nova - conversation widget proxy, reference normalizer and turn state machine."""

__version__ = "0.1.0"
