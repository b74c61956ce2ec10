"""Command-line interface for parsing and converting chemical formulas."""
import argparse
import json
import sys
from typing import List, Optional

from chemformula.config import settings
from chemformula.processors.composition_parser import CompositionParser
from chemformula.services.conversion_service import ConversionService
from chemformula.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chemformula",
        description="Parse composition expressions and convert between molar and weight-percent views"
    )
    parser.add_argument(
        "formulas",
        nargs="*",
        help="Formulas to convert, e.g. 'SiO2' or '(Pt5wt%%/SiO2)50wt%%(CeO2)50wt%%'"
    )
    parser.add_argument(
        "--file",
        type=str,
        default=None,
        help="Text file with one formula per line"
    )
    parser.add_argument(
        "--view",
        action="append",
        choices=settings.supported_views,
        help="View to print; repeat for several (default: all)"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Map unrecognized element codes to NONE instead of failing"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Convert every formula given on the command line or in --file."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, stream=sys.stderr)

    formulas = list(args.formulas)
    if args.file:
        try:
            formulas.extend(ConversionService.load_formulas(args.file))
        except OSError as e:
            parser.error(f"cannot read {args.file}: {e}")
    if not formulas:
        parser.error("no formulas given")

    service = ConversionService(CompositionParser(strict_elements=not args.lenient))
    results = service.convert_batch(formulas, args.view)

    for result in results:
        result.pop("processing_time", None)
        print(json.dumps(result, indent=2))

    failed = [result for result in results if not result["success"] or "view_errors" in result]
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
