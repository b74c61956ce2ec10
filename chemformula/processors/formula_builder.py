"""Fold a formula parse tree into a Composition."""
import logging
from typing import Optional, Tuple

from lark import Token, Tree
from lark.visitors import Interpreter

from chemformula.config import settings
from chemformula.errors import UnrecognizedElementError
from chemformula.models.composition import Composition
from chemformula.models.element import ElementSymbol

logger = logging.getLogger(__name__)

WEIGHT_PERCENT = "weight_percent"


class FormulaBuilder(Interpreter):
    """
    Recursive, post-order fold of a formula tree.

    Children are built before their parent combines them, so a multiplier or
    a weight-percent suffix always applies to a fully built sub-formula.
    Sibling groups are summed with `Composition.merge`.
    """

    def __init__(self, strict_elements: Optional[bool] = None):
        if strict_elements is None:
            strict_elements = settings.strict_elements
        self.strict_elements = strict_elements

    def build(self, tree: Tree) -> Composition:
        return self.visit(tree)

    def formula(self, tree: Tree) -> Composition:
        composition = Composition()
        for child in tree.children:
            composition.merge(self.visit(child))
        return composition

    def group(self, tree: Tree) -> Composition:
        composition = self.visit(tree.children[0])
        if len(tree.children) == 1:
            return composition

        kind, value = self._stoichiometry(tree.children[1])
        if kind == WEIGHT_PERCENT:
            # The whole bracketed sub-formula becomes a mass contribution.
            return composition.to_molar().scale_as_weight_percent(value)
        return composition.scale(value)

    def element(self, tree: Tree) -> Composition:
        symbol = self._symbol(tree.children[0])
        composition = Composition()
        if len(tree.children) == 1:
            return composition.add_element(symbol, 1.0)

        kind, value = self._stoichiometry(tree.children[1])
        if kind == WEIGHT_PERCENT:
            return composition.add_weight_percent(symbol, value)
        return composition.add_element(symbol, value)

    def _symbol(self, token: Token) -> ElementSymbol:
        code = str(token)
        symbol = ElementSymbol.from_str(code)
        if symbol is ElementSymbol.NONE:
            if self.strict_elements:
                raise UnrecognizedElementError(code, token.column)
            logger.warning("Unrecognized element %r at column %s, using NONE", code, token.column)
        return symbol

    @staticmethod
    def _stoichiometry(tree: Tree) -> Tuple[str, float]:
        suffix = tree.children[0]
        return str(suffix.data), float(suffix.children[0])
