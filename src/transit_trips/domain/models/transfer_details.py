"""Transfer details domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferDetails:
    """Connection quality at one changeover between two public legs."""

    feasibility_probability: float | None = None  # 0.0..1.0, None if the backend can't tell
