"""dater: automated multi-channel recommendation triage."""

__version__ = "0.1.0"
