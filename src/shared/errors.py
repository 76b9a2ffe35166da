"""Exception hierarchy for the test-plan tooling."""
from __future__ import annotations

from pathlib import Path


class PlanToolError(Exception):
    """Base application error.

    ``exit_code`` is the process exit status the CLI uses when the error
    aborts a run.
    """

    def __init__(self, detail: str, exit_code: int = 1) -> None:
        self.detail = detail
        self.exit_code = exit_code
        super().__init__(detail)


class DataLoadError(PlanToolError):
    """An input document is missing or cannot be parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(detail=f"Error reading {self.path.name}: {reason}")


class CustomerNotFoundError(PlanToolError):
    """The ``--customer`` filter matched no known customer."""

    def __init__(self, customer_key: str) -> None:
        self.customer_key = customer_key
        super().__init__(detail=f"No customer found matching: {customer_key}")


class GitRefError(PlanToolError):
    """Flag data could not be read at a git ref."""

    def __init__(self, ref: str, path: str) -> None:
        self.ref = ref
        self.path = path
        super().__init__(detail=f"Could not read {path} at ref: {ref}")


class NotificationError(PlanToolError):
    """Posting a changelog notification failed."""

    def __init__(self, detail: str = "Notification failed") -> None:
        super().__init__(detail=detail)
