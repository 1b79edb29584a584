from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from typing import Any, Dict, List, Sequence

from ..config import MATCH_CUTOFF, load_ocr_settings
from ..domain import (
    ExtractedReceiptItem,
    Food,
    GroceryTrip,
    Meal,
    NutritionSummary,
    map_to_meal_items,
    map_to_trip_items,
    score_match,
)
from ..logging import get_logger, set_level
from ..paths import resolve_input_path

LOG = get_logger("cli-main")


def _load_json_list(path: str, what: str) -> List[Any]:
    p = resolve_input_path(path)
    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{what} file must contain a JSON list: {p}")
    LOG.debug(f"Loaded {len(data)} {what} entries from {p}")
    return data


def load_catalog(path: str) -> List[Food]:
    """Read a food catalog: a JSON list of names or of objects with a "name" key."""
    foods: List[Food] = []
    for entry in _load_json_list(path, "catalog"):
        if isinstance(entry, str):
            foods.append(Food(name=entry))
        elif isinstance(entry, dict) and "name" in entry:
            foods.append(Food.from_dict(entry))
        else:
            raise ValueError(f"Unsupported catalog entry: {entry!r}")
    return foods


def _mapped_item_dict(item: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "name": item.name,
        "quantity": item.quantity,
        "food": item.food.name if item.food else None,
    }
    if hasattr(item, "price"):
        out["price"] = item.price
    nutrition = item.calculated_nutrition
    out["nutrition"] = dataclasses.asdict(nutrition) if nutrition else None
    return out


def _handle_ocr(ns: argparse.Namespace) -> int:
    from ..ocr import OcrError, TextRecognitionPipeline, extract_text_from_pdf

    overrides: Dict[str, Any] = {}
    if ns.workers is not None:
        overrides["max_workers"] = ns.workers
    if ns.lang:
        overrides["tesseract_lang"] = ns.lang
    try:
        settings = load_ocr_settings(os.getcwd())
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
    except ValueError as exc:
        LOG.error(f"Invalid OCR settings: {exc}")
        return 2

    source = resolve_input_path(ns.source)
    if not os.path.isfile(source):
        LOG.error(f"Source file not found: {source}")
        return 2
    pipeline = TextRecognitionPipeline(settings=settings)
    try:
        if source.lower().endswith(".pdf"):
            text = extract_text_from_pdf(source, pipeline=pipeline)
        else:
            text = pipeline.extract_text(source)
    except OcrError as exc:
        LOG.error(f"Text recognition failed: {exc}")
        return 1

    LOG.info(f"Recognised {len(text)} characters from {source}")
    if ns.output:
        out = resolve_input_path(ns.output)
        os.makedirs(os.path.dirname(out) or ".", exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            f.write(text)
        LOG.info(f"Wrote: {out}")
    else:
        print(text)
    return 0


def _handle_match(ns: argparse.Namespace) -> int:
    try:
        foods = load_catalog(ns.catalog)
    except (OSError, ValueError) as exc:
        LOG.error(f"Could not load catalog: {exc}")
        return 2
    result = score_match(ns.name, foods, min_score=ns.min_score)
    print(json.dumps(
        {"match": result.candidate.name if result.candidate else None, "score": round(result.score, 4)},
        ensure_ascii=False,
    ))
    return 0 if result.candidate is not None else 1


def _handle_map(ns: argparse.Namespace) -> int:
    try:
        foods = load_catalog(ns.catalog)
        raw_items = _load_json_list(ns.items, "items")
        extracted = [ExtractedReceiptItem.from_dict(d) for d in raw_items if isinstance(d, dict)]
    except (OSError, ValueError) as exc:
        LOG.error(f"Could not load input: {exc}")
        return 2

    if ns.kind == "meal":
        items: List[Any] = map_to_meal_items(extracted, foods)
        summary = NutritionSummary.for_meals([Meal(items=items)])
    else:
        items = map_to_trip_items(extracted, foods)
        summary = NutritionSummary.for_trips([GroceryTrip(items=items)])

    linked = sum(1 for i in items if i.food is not None)
    LOG.info(f"Linked {linked}/{len(items)} item(s) to the catalog")
    out = {
        "items": [_mapped_item_dict(i) for i in items],
        "summary": summary.to_dict(),
    }
    print(json.dumps(out, ensure_ascii=False))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    LOG.debug(f"CLI invoked with arguments: {provided}")

    parser = argparse.ArgumentParser(
        prog="grocery-scan",
        description="Recognise receipt/label text and link extracted items to a food catalog.",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run (DEBUG, INFO, WARNING, ...)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ocr_cmd = subparsers.add_parser("ocr", help="Extract text from a receipt image or PDF.")
    ocr_cmd.add_argument("source", help="Path to an image (JPG/PNG/...) or PDF")
    ocr_cmd.add_argument("--workers", type=int, help="Concurrent segment recognitions")
    ocr_cmd.add_argument("--lang", help="Tesseract language code(s), e.g. eng or deu+eng")
    ocr_cmd.add_argument("--output", help="Write text to this file instead of stdout")
    ocr_cmd.set_defaults(handler=_handle_ocr)

    match_cmd = subparsers.add_parser("match", help="Find the catalog food matching a name.")
    match_cmd.add_argument("name")
    match_cmd.add_argument("--catalog", required=True, help="JSON list of food names or objects")
    match_cmd.add_argument("--min-score", type=float, default=MATCH_CUTOFF)
    match_cmd.set_defaults(handler=_handle_match)

    map_cmd = subparsers.add_parser("map", help="Link extracted receipt items to catalog foods.")
    map_cmd.add_argument("--items", required=True, help="JSON list of {name, quantity_grams, price}")
    map_cmd.add_argument("--catalog", required=True)
    map_cmd.add_argument("--kind", choices=["trip", "meal"], default="trip")
    map_cmd.set_defaults(handler=_handle_map)

    args = parser.parse_args(provided)
    if args.log_level:
        set_level(args.log_level)
    code = args.handler(args)
    LOG.debug(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
