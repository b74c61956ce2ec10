"""Error kinds raised while parsing and converting compositions."""
from typing import Optional


class FormulaError(ValueError):
    """Base class for every parsing and conversion failure."""


class CompositionParsingError(FormulaError):
    """The input does not conform to the formula grammar."""

    def __init__(self, message: str, column: Optional[int] = None):
        super().__init__(message)
        self.column = column


class UnrecognizedElementError(CompositionParsingError):
    """An element code outside the supported element set."""

    def __init__(self, code: str, column: Optional[int] = None):
        message = f"Unsupported element: {code}"
        if column is not None:
            message += f" (column {column})"
        super().__init__(message, column)
        self.code = code


class WeightPercentOverflowError(FormulaError):
    """Mass fractions of a composition sum to more than 100 percent."""

    def __init__(self, total: float):
        super().__init__(f"Weight percent overflow: mass fractions sum to {total:g}%, more than 100%")
        self.total = total


class IndeterminateScaleError(FormulaError):
    """A conversion has no mass or molar anchor to fix its scale."""
