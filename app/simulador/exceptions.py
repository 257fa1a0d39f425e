"""
Failure taxonomy of the simulation engine.
"""
from typing import List, Sequence


class SimulationError(Exception):
    """Base class for every error raised by the simulation pipeline."""


class ValidationFailure(SimulationError):
    """One or more input preconditions are violated. Recoverable by fixing the input."""

    def __init__(self, errors: Sequence[str]):
        self.errors: List[str] = list(errors)
        super().__init__(", ".join(self.errors))


class ComputationFailure(SimulationError):
    """Arithmetic produced a non-finite or out-of-domain value."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"[{stage}] {message}")


class PreconditionViolation(SimulationError):
    """A stage was invoked with input it must never receive. Indicates a caller bug."""
