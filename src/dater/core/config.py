"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DecisionConfig:
    """Score thresholds used to turn a taste score into a decision.

    Scores at or above ``like_threshold`` are liked, scores below
    ``pass_threshold`` are passed, anything in between is left undecided.
    """

    like_threshold: float
    pass_threshold: float
