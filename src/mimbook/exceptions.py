"""
Exception hierarchy for mimbook

Missing roles, unknown categories and empty collections are handled by
degradation, not exceptions. Everything here signals either bad input
(caught by the loader) or a broken generator.
"""


class MimbookError(Exception):
    """Base class for all mimbook errors"""


class RunbookInvariantError(MimbookError):
    """Raised when a generated runbook violates a structural invariant"""


class InputValidationError(MimbookError):
    """Raised when an input document fails schema validation"""

    def __init__(self, source: str, errors: list):
        self.source = source
        self.errors = errors
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors[:5])
        super().__init__(f"{source} failed validation: {summary}")
