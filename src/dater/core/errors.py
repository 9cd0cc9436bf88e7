"""Domain errors shared by the core and the adapters."""

from __future__ import annotations


class DaterError(Exception):
    """Base class for every dater error."""


class NotAuthorizedError(DaterError):
    """The channel session is invalid and must be re-authorized."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"Not authorized in {channel} channel")
        self.channel = channel


class OutOfLikesError(DaterError):
    """The channel refuses further likes for the current cycle."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"Out of likes in {channel} channel")
        self.channel = channel


class AlreadyCheckedOutEarlierError(DaterError):
    """The recommendation was already decided in an earlier run."""

    def __init__(self, recommendation) -> None:
        super().__init__(
            f"Recommendation {recommendation.channel_id} from {recommendation.channel} "
            "was already checked out earlier"
        )
        self.recommendation = recommendation


class ChannelError(DaterError):
    """Unclassified failure reported by a channel."""


class TasteError(DaterError):
    """The taste service could not score a candidate."""
