"""Chemical composition parsing and validation."""
import logging
from typing import Optional, Set, Tuple

from chemformula.config import settings
from chemformula.errors import CompositionParsingError, FormulaError
from chemformula.models.composition import Composition
from chemformula.models.element import get_supported_symbols
from chemformula.processors.formula_builder import FormulaBuilder
from chemformula.processors.formula_grammar import parse_tree

logger = logging.getLogger(__name__)


class CompositionParser:
    """Parser for stoichiometric, weight-percent and nested composite formulas."""

    SUPPORTED_ELEMENTS = get_supported_symbols()

    def __init__(self, strict_elements: Optional[bool] = None):
        """
        Initialize the parser.

        Args:
            strict_elements: Reject unknown element codes; defaults to
                settings.strict_elements
        """
        if strict_elements is None:
            strict_elements = settings.strict_elements
        self.strict_elements = strict_elements
        self.builder = FormulaBuilder(strict_elements=strict_elements)

    def parse(self, formula: str) -> Composition:
        """
        Parse chemical formula string to a Composition.

        Args:
            formula: Chemical formula string (e.g., "SiO2", "Pt5wt%/SiO2",
                "(Pt5wt%/SiO2)50wt%(CeO2)50wt%")

        Returns:
            Composition holding molar amounts and mass fractions

        Raises:
            CompositionParsingError: If the formula is malformed, nested too
                deeply or contains unsupported elements
            WeightPercentOverflowError: If a bracketed group's mass fractions
                exceed 100%
        """
        if not isinstance(formula, str) or not formula:
            raise CompositionParsingError("Formula must be a non-empty string")

        # Remove whitespace
        formula = formula.strip()
        if not formula:
            raise CompositionParsingError("Formula cannot be empty")

        tree = parse_tree(formula)
        try:
            composition = self.builder.build(tree)
        except RecursionError as e:
            raise CompositionParsingError("Formula is nested too deeply") from e

        logger.debug("formula %r result %r", formula, composition)
        return composition

    def validate_formula(self, formula: str) -> Tuple[bool, str]:
        """
        Validate chemical formula without raising exceptions.

        Args:
            formula: Chemical formula string

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            self.parse(formula)
            return True, ""
        except FormulaError as e:
            return False, str(e)

    @staticmethod
    def get_supported_elements() -> Set[str]:
        """Get the set of supported element symbols."""
        return set(CompositionParser.SUPPORTED_ELEMENTS)


# Convenience functions

def parse_formula(formula: str, strict_elements: Optional[bool] = None) -> Composition:
    """Parse a formula with a one-off parser."""
    return CompositionParser(strict_elements=strict_elements).parse(formula)


def validate_formula(formula: str) -> Tuple[bool, str]:
    """Validate a formula with the default parser settings."""
    return CompositionParser().validate_formula(formula)


def get_supported_elements() -> Set[str]:
    return CompositionParser.get_supported_elements()


# Example usage and validation
def get_example_formulas() -> list:
    """Get list of example formulas for user guidance."""
    return [
        "SiO2",
        "Fe2O3",
        "Ca(OH)2",
        "Al2(SO4)3",
        "Pt5wt%/SiO2",
        "Pt1wt%Pd0.5wt%/Al2O3",
        "(Pt5wt%/SiO2)50wt%(CeO2)50wt%",
        "(Ni10wt%/Al2O3)3(MgO)"
    ]
