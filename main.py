"""Metallurgist Calculator — batch entry point.

Reads one JSON request, runs the matching calculation and prints the
result as JSON.

    python main.py alloying request.json
    python main.py caster request.json --data-dir ./reference
"""
import argparse
import json
import logging
import sys

from metcalc.constants import APP_NAME, APP_VERSION
from metcalc.core.engine import MetallurgyEngine
from metcalc.core.errors import CatalogError, InvalidInput
from metcalc.core.serializers import (
    alloying_result_to_dict,
    caster_result_to_dict,
    dict_to_alloying_request,
    dict_to_caster_request,
)

EXIT_INVALID_INPUT = 2
EXIT_CATALOG_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="metcalc", description=APP_NAME)
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("calculation", choices=["alloying", "caster"])
    parser.add_argument("request", help="JSON request file ('-' for stdin)")
    parser.add_argument("--data-dir", default=None, help="Reference data directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run(calculation: str, data: dict, engine: MetallurgyEngine) -> dict:
    """Run one calculation on a parsed request and return the result dict."""
    if calculation == "alloying":
        request = dict_to_alloying_request(data)
        return alloying_result_to_dict(engine.alloying.calculate(request))
    request = dict_to_caster_request(data)
    return caster_result_to_dict(engine.caster.calculate(request))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.request == "-":
            data = json.load(sys.stdin)
        else:
            with open(args.request, encoding="utf-8") as f:
                data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read request: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    if not isinstance(data, dict):
        print("Request must be a JSON object", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        engine = MetallurgyEngine.create(args.data_dir)
        result = run(args.calculation, data, engine)
    except InvalidInput as exc:
        print(f"Invalid input ({exc.field}): {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except CatalogError as exc:
        print(f"Reference data error: {exc}", file=sys.stderr)
        return EXIT_CATALOG_ERROR

    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
