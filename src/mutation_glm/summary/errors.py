"""Summary exception hierarchy for error handling and exit codes.

This module defines the exceptions raised while turning a fitted model into
a posterior report. Each class carries an exit code for CLI integration and
an optional stage name so messages read ``[stage] message``.
"""

from __future__ import annotations


class SummaryError(Exception):
    """Base exception for posterior summary failures.

    Attributes:
        message: Human-readable error description.
        stage: Name of the summary step where the error occurred (optional).
        exit_code: Process exit code for CLI integration.

    Example:
        >>> raise SummaryError("Something went wrong", stage="extract")
        SummaryError: [extract] Something went wrong
    """

    def __init__(
        self,
        message: str,
        stage: str = "",
        exit_code: int = 1,
    ) -> None:
        self.message = message
        self.stage = stage
        self.exit_code = exit_code
        super().__init__(str(self))

    def __str__(self) -> str:
        """Format error with stage prefix if available."""
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class StructuralError(SummaryError):
    """Fit output does not have the expected table layout.

    Raised when:
    - The summary table has too few rows for the positional layout
    - The intercept row cannot be found by name
    - Required summary columns are missing
    - The covariance matrix does not match the extracted parameters

    Exit code: 3
    """

    def __init__(self, message: str, stage: str = "extract") -> None:
        super().__init__(message, stage=stage, exit_code=3)


class FeatureLookupError(SummaryError, LookupError):
    """Requested feature names are not among the extracted parameters.

    Attributes:
        missing: Requested names that were not found, in request order.

    Exit code: 4
    """

    def __init__(
        self,
        missing: tuple[str, ...] | list[str],
        stage: str = "filter",
        message: str | None = None,
    ) -> None:
        self.missing = tuple(missing)
        if message is None:
            message = f"Unknown feature(s): {', '.join(self.missing)}"
        super().__init__(message, stage=stage, exit_code=4)


class NumericError(SummaryError, ArithmeticError):
    """Numeric values make a summary quantity undefined.

    Raised for non-positive variances on the covariance diagonal and for
    non-finite posterior means that cannot be ordered.

    Attributes:
        parameters: Names of the offending parameters.

    Exit code: 5
    """

    def __init__(
        self,
        message: str,
        parameters: tuple[str, ...] | list[str] = (),
        stage: str = "annotate",
    ) -> None:
        self.parameters = tuple(parameters)
        super().__init__(message, stage=stage, exit_code=5)
