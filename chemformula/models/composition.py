"""Composition algebra: molar and mass-fraction views of a chemical formula."""
import logging
from numbers import Real
from typing import Dict, Mapping, Optional, Set, Union

from chemformula.errors import (
    IndeterminateScaleError,
    UnrecognizedElementError,
    WeightPercentOverflowError
)
from chemformula.models.element import ElementSymbol, atomic_weight

logger = logging.getLogger(__name__)

WEIGHT_PERCENT_TOTAL = 100.0

# Mass units attributed to the residue when no molar sub-formula anchors the scale.
RESIDUE_ANCHOR_MASS = 100.0

# Absorbs float rounding when summing the fractions of weighted sub-formulas.
WEIGHT_PERCENT_TOLERANCE = 1e-12

SymbolLike = Union[ElementSymbol, str]


def _to_symbol(element: SymbolLike) -> ElementSymbol:
    if isinstance(element, ElementSymbol):
        return element
    symbol = ElementSymbol.from_str(element)
    if symbol is ElementSymbol.NONE:
        raise UnrecognizedElementError(element)
    return symbol


def _molar_mass(molar: Mapping[ElementSymbol, float]) -> float:
    return sum(amount * atomic_weight(element) for element, amount in molar.items())


class Composition:
    """
    A possibly partial chemical formula.

    An element may carry a molar amount (moles per formula unit), a mass
    fraction (percent of the total mass), or transiently both while the
    formula is being built. The conversion methods never mutate their input.

    Attributes:
        elements: Elements present in either map
        molar: Molar amount per element
        mass_fraction: Mass percent per element
    """

    def __init__(
        self,
        molar: Optional[Mapping[SymbolLike, float]] = None,
        mass_fraction: Optional[Mapping[SymbolLike, float]] = None
    ):
        self.elements: Set[ElementSymbol] = set()
        self.molar: Dict[ElementSymbol, float] = {}
        self.mass_fraction: Dict[ElementSymbol, float] = {}

        for element, amount in (molar or {}).items():
            self.add_element(element, amount)
        for element, fraction in (mass_fraction or {}).items():
            self.add_weight_percent(element, fraction)

    # In-place builders

    def add_element(self, element: SymbolLike, amount: float) -> "Composition":
        """Accumulate a molar amount for an element."""
        symbol = _to_symbol(element)
        self.elements.add(symbol)
        self.molar[symbol] = self.molar.get(symbol, 0.0) + amount
        return self

    def add_weight_percent(self, element: SymbolLike, fraction: float) -> "Composition":
        """Accumulate a mass fraction for an element."""
        symbol = _to_symbol(element)
        self.elements.add(symbol)
        self.mass_fraction[symbol] = self.mass_fraction.get(symbol, 0.0) + fraction
        return self

    def merge(self, other: "Composition") -> "Composition":
        """Add every entry of `other` into this composition, summing shared keys."""
        for element, amount in other.molar.items():
            self.add_element(element, amount)
        for element, fraction in other.mass_fraction.items():
            self.add_weight_percent(element, fraction)
        self.elements.update(other.elements)
        return self

    # Value operations

    def copy(self) -> "Composition":
        composition = Composition()
        composition.elements = set(self.elements)
        composition.molar = dict(self.molar)
        composition.mass_fraction = dict(self.mass_fraction)
        return composition

    def is_empty(self) -> bool:
        return not self.elements

    def add(self, other: "Composition") -> "Composition":
        """Element-wise sum of both maps; the empty composition is the identity."""
        return self.copy().merge(other)

    def scale(self, factor: float) -> "Composition":
        """Multiply every molar amount and every mass fraction by `factor`."""
        composition = self.copy()
        composition.molar = {element: amount * factor for element, amount in self.molar.items()}
        composition.mass_fraction = {
            element: fraction * factor for element, fraction in self.mass_fraction.items()
        }
        return composition

    def to_molar(self) -> "Composition":
        """
        Fold every mass fraction into the molar map.

        The molar sub-formula is taken to occupy the mass left over by the
        explicit fractions, which fixes the molar amount of every
        mass-fraction element. Without a molar sub-formula the residue is
        taken to weigh RESIDUE_ANCHOR_MASS.

        Returns:
            Composition with an empty mass-fraction map

        Raises:
            WeightPercentOverflowError: If the mass fractions exceed 100%
            IndeterminateScaleError: If the mass fractions leave no residue
        """
        if not self.mass_fraction:
            return self.copy()

        wt_sum = sum(self.mass_fraction.values())
        if wt_sum > WEIGHT_PERCENT_TOTAL + WEIGHT_PERCENT_TOLERANCE:
            raise WeightPercentOverflowError(wt_sum)

        for element in self.mass_fraction:
            if atomic_weight(element) == 0.0:
                raise UnrecognizedElementError(element.name)

        wt_over_mw = sum(
            fraction / atomic_weight(element) for element, fraction in self.mass_fraction.items()
        )

        residue_percent = WEIGHT_PERCENT_TOTAL - wt_sum
        if abs(residue_percent) <= WEIGHT_PERCENT_TOLERANCE:
            raise IndeterminateScaleError(
                "Mass fractions sum to 100% and leave no residue; the molar scale is indeterminate"
            )

        residue_mw = _molar_mass(self.molar) if self.molar else RESIDUE_ANCHOR_MASS
        main_mw = residue_mw * wt_over_mw / residue_percent

        composition = Composition()
        composition.elements = set(self.elements)
        composition.molar = dict(self.molar)
        for element, fraction in self.mass_fraction.items():
            if wt_over_mw:
                amount = main_mw * fraction / atomic_weight(element) / wt_over_mw
            else:
                amount = 0.0
            composition.molar[element] = composition.molar.get(element, 0.0) + amount

        logger.debug(
            "to_molar: wt_sum=%.6g residue=%.6g residue_mw=%.6g main_mw=%.6g",
            wt_sum, residue_percent, residue_mw, main_mw
        )
        return composition

    def molecular_weight(self) -> float:
        """Mass of one formula unit in g/mol, after folding mass fractions in."""
        return _molar_mass(self.to_molar().molar)

    def to_weight_fraction(self) -> "Composition":
        """Express every element as percent of the molecular weight (raw ratios)."""
        if not self.molar:
            return self.copy()

        formula = self.to_molar()
        mw = formula.molecular_weight()
        if mw == 0.0:
            raise IndeterminateScaleError("Molecular weight is zero; mass fractions are undefined")

        composition = Composition()
        composition.elements = set(formula.elements)
        composition.mass_fraction = {
            element: amount * atomic_weight(element) * WEIGHT_PERCENT_TOTAL / mw
            for element, amount in formula.molar.items()
        }
        return composition

    def to_weight_percent(self) -> "Composition":
        """Mass fractions renormalized to sum to exactly 100."""
        composition = self.to_weight_fraction()
        if not composition.mass_fraction:
            return composition

        total = sum(composition.mass_fraction.values())
        if total == 0.0:
            raise IndeterminateScaleError("Mass fractions sum to zero and cannot be normalized")
        return composition.scale(WEIGHT_PERCENT_TOTAL / total)

    def to_molar_percent(self) -> "Composition":
        """Molar amounts renormalized to sum to exactly 100."""
        composition = self.to_molar()
        if not composition.molar:
            return Composition()

        total = sum(composition.molar.values())
        if total == 0.0:
            raise IndeterminateScaleError("Molar amounts sum to zero and cannot be normalized")
        return composition.scale(WEIGHT_PERCENT_TOTAL / total)

    def scale_as_weight_percent(self, percent: float) -> "Composition":
        """
        Re-express the whole formula as a `percent` mass contribution.

        The result is not renormalized: it holds `percent` mass units split
        between the elements, ready to be added to sibling contributions.
        """
        formula = self.to_molar()
        mw = formula.molecular_weight()
        if mw == 0.0:
            raise IndeterminateScaleError("Molecular weight is zero; cannot assign a mass contribution")

        composition = Composition()
        composition.elements = set(formula.elements)
        composition.mass_fraction = {
            element: amount * atomic_weight(element) / mw * percent
            for element, amount in formula.molar.items()
        }
        return composition

    # Serialization and dunder helpers

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        """Plain dict view keyed by element symbol."""
        return {
            "molar": {element.name: amount for element, amount in self.molar.items()},
            "mass_fraction": {
                element.name: fraction for element, fraction in self.mass_fraction.items()
            }
        }

    def __add__(self, other):
        if not isinstance(other, Composition):
            return NotImplemented
        return self.add(other)

    def __mul__(self, factor):
        if not isinstance(factor, Real):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Composition):
            return NotImplemented
        return (
            self.elements == other.elements
            and self.molar == other.molar
            and self.mass_fraction == other.mass_fraction
        )

    __hash__ = None

    def __repr__(self):
        data = self.as_dict()
        return f"Composition(molar={data['molar']}, mass_fraction={data['mass_fraction']})"
