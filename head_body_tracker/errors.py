"""
Exception types.

All errors derive from built-in exception classes so callers can catch
them broadly (ValueError for bad inputs, ArithmeticError for estimation).
"""


class ConfigurationError(ValueError):
    """Invalid generator or sampler configuration (e.g. negative sigma)."""


class PreconditionError(ValueError):
    """Invalid input to weighted-mean estimation."""


class AveragingDegenerateError(ArithmeticError):
    """
    Circular mean is undefined because the direction vectors cancel.

    Attributes:
        dimension: "head" or "body"
    """

    def __init__(self, dimension: str, message: str = ""):
        self.dimension = dimension
        if not message:
            message = f"Failed to calculate {dimension} direction average."
        super().__init__(message)
