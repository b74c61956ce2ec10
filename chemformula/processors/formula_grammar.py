"""Grammar engine turning a formula string into a Lark parse tree."""
import logging
from functools import lru_cache
from pathlib import Path

from lark import Lark, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from chemformula.errors import CompositionParsingError

logger = logging.getLogger(__name__)

GRAMMAR_FILE = Path(__file__).parent / "formula.lark"


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the LALR parser for the formula grammar once."""
    logger.debug("Loading formula grammar from %s", GRAMMAR_FILE)
    return Lark.open(str(GRAMMAR_FILE), start="formula", parser="lalr")


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedCharacters):
        return f"unexpected character {error.char!r} at column {error.column}"
    if isinstance(error, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(error, UnexpectedToken):
        if error.token.type == "$END":
            return "unexpected end of input (unmatched parenthesis?)"
        if error.token.type == "RPAR":
            return f"unmatched parenthesis at column {error.column}"
        return f"unexpected {error.token!r} at column {error.column}"
    return str(error)


def parse_tree(formula: str) -> Tree:
    """
    Parse a formula string into a syntax tree.

    Args:
        formula: Formula string, e.g. "Pt5wt%/SiO2"

    Returns:
        Lark tree rooted at the `formula` rule

    Raises:
        CompositionParsingError: If the string does not follow the grammar
    """
    try:
        return get_parser().parse(formula)
    except UnexpectedInput as e:
        column = getattr(e, "column", None)
        raise CompositionParsingError(
            f"Invalid chemical formula '{formula}': {_describe(e)}",
            column=column if isinstance(column, int) and column > 0 else None
        ) from e
