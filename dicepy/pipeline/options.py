"""Engine configuration."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RollerOptions:
    """Soft limits applied while rolling.

    Hitting any of them degrades to a warning plus a best-effort value.
    """

    max_reroll_attempts: int = 10
    max_exhaustive_cycles: int = 99
    default_max_rolls: int = 99
    default_max_nesting: int = 99

    def __post_init__(self) -> None:
        for name in (
            "max_reroll_attempts",
            "max_exhaustive_cycles",
            "default_max_rolls",
            "default_max_nesting",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
