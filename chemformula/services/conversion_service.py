"""Conversion service orchestrating parsing and derived composition views."""
import hashlib
import logging
import time
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from chemformula.config import settings
from chemformula.errors import FormulaError
from chemformula.models.composition import Composition
from chemformula.processors.composition_parser import CompositionParser

logger = logging.getLogger(__name__)


class ConversionService:
    """Service turning formula strings into molar and mass-based views."""

    VIEWS = tuple(settings.supported_views)

    def __init__(
        self,
        parser: Optional[CompositionParser] = None,
        use_cache: bool = True,
        cache_size: Optional[int] = None
    ):
        """
        Initialize conversion service.

        Args:
            parser: Composition parser; a default one is created if omitted
            use_cache: Whether to cache parsed compositions
            cache_size: Maximum cached compositions (settings.cache_size)
        """
        self.parser = parser or CompositionParser()
        self.use_cache = use_cache
        self.cache_size = settings.cache_size if cache_size is None else cache_size

        # Cache for parsed compositions
        self._composition_cache: "OrderedDict[str, Composition]" = OrderedDict()

    def _get_formula_hash(self, formula: str) -> str:
        """Generate hash for formula caching."""
        return hashlib.md5(formula.encode()).hexdigest()

    def _parse_cached(self, formula: str) -> Composition:
        """Parse formula with caching."""
        if not self.use_cache:
            return self.parser.parse(formula)

        formula_hash = self._get_formula_hash(formula)
        if formula_hash in self._composition_cache:
            self._composition_cache.move_to_end(formula_hash)
            return self._composition_cache[formula_hash].copy()

        composition = self.parser.parse(formula)
        self._composition_cache[formula_hash] = composition
        if len(self._composition_cache) > self.cache_size:
            self._composition_cache.popitem(last=False)

        return composition.copy()

    def _check_views(self, views: Optional[Iterable[str]]) -> List[str]:
        if views is None:
            return list(self.VIEWS)
        views = list(views)
        unknown = [view for view in views if view not in self.VIEWS]
        if unknown:
            raise ValueError(
                f"Unknown views: {', '.join(unknown)}. Available: {', '.join(self.VIEWS)}"
            )
        return views

    @staticmethod
    def render_view(composition: Composition, view: str) -> Union[float, Dict]:
        """Compute one derived view of a composition."""
        if view == "composition":
            return composition.as_dict()
        if view == "molar":
            return composition.to_molar().as_dict()["molar"]
        if view == "weight_percent":
            return composition.to_weight_percent().as_dict()["mass_fraction"]
        if view == "molar_percent":
            return composition.to_molar_percent().as_dict()["molar"]
        if view == "molecular_weight":
            return composition.molecular_weight()
        raise ValueError(f"Unknown view: {view}")

    def convert(self, formula: str, views: Optional[Iterable[str]] = None) -> Dict:
        """
        Parse a formula and compute the requested views.

        Args:
            formula: Chemical formula string
            views: View names to compute (all views if None)

        Returns:
            Dictionary with conversion results. A formula that cannot be
            parsed gives success=False; a view that cannot be computed is
            set to None and explained under "view_errors".

        Raises:
            ValueError: If an unknown view is requested
        """
        views = self._check_views(views)
        start_time = time.time()

        try:
            composition = self._parse_cached(formula)
        except FormulaError as e:
            logger.info("Parsing %r failed: %s", formula, e)
            return {
                "error": str(e),
                "error_type": type(e).__name__,
                "formula": formula,
                "success": False
            }

        result = {
            "success": True,
            "formula": formula
        }
        view_errors = {}
        for view in views:
            try:
                result[view] = self.render_view(composition, view)
            except FormulaError as e:
                logger.info("View %s of %r failed: %s", view, formula, e)
                result[view] = None
                view_errors[view] = str(e)

        if view_errors:
            result["view_errors"] = view_errors
        result["processing_time"] = time.time() - start_time
        return result

    def convert_batch(
        self,
        formulas: List[str],
        views: Optional[Iterable[str]] = None
    ) -> List[Dict]:
        """
        Convert multiple formulas.

        Args:
            formulas: List of chemical formula strings
            views: View names to compute for every formula

        Returns:
            List of conversion results
        """
        views = self._check_views(views)
        results = []
        for formula in formulas:
            result = self.convert(formula, views)
            results.append(result)

        return results

    @staticmethod
    def load_formulas(path: Union[str, Path]) -> List[str]:
        """
        Read formulas from a text file, one per line.

        Blank lines and lines starting with '#' are skipped.
        """
        formulas = []
        with open(path, "r", encoding="utf-8") as ifh:
            for line in ifh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                formulas.append(line)

        logger.info("Read %d formulas from %s", len(formulas), path)
        return formulas
