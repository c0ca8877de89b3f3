#!/usr/bin/env python3
"""Validate and score a receipt JSON file without running the API.

Usage:
    python -m scripts.score_receipt samples/target-receipt.json
    python -m scripts.score_receipt receipt.json --breakdown

Prints the points as JSON. Exits with status 1 if the receipt is rejected.
"""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from receipt_processor.receipts.schema import Receipt
from receipt_processor.receipts.scorer import score_breakdown
from receipt_processor.receipts.validator import validate_receipt

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def load_receipt(path: Path) -> Receipt:
    """Load a receipt from a JSON file.

    Args:
        path: Path to receipt JSON

    Returns:
        Parsed receipt

    Raises:
        FileNotFoundError: If the file doesn't exist
        pydantic.ValidationError: If the JSON doesn't match the receipt schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Receipt file not found: {path}")

    return Receipt.model_validate_json(path.read_text(encoding="utf-8"))


def score_file(path: Path, breakdown: bool = False) -> dict[str, Any]:
    """Validate and score a receipt file.

    Args:
        path: Path to receipt JSON
        breakdown: Include per-rule contributions in the output

    Returns:
        Output document: points (and rules) when accepted, error otherwise
    """
    receipt = load_receipt(path)

    result = validate_receipt(receipt)
    if not result.accepted:
        reason = result.rejection
        return {"error": reason.value, "message": reason.message}

    scores = score_breakdown(receipt)
    output: dict[str, Any] = {"points": scores.total}
    if breakdown:
        output["rules"] = asdict(scores)
    return output


def main(argv: list[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Score a receipt JSON file")
    parser.add_argument("receipt", type=Path, help="Path to receipt JSON file")
    parser.add_argument(
        "--breakdown",
        action="store_true",
        help="Show points contributed by each rule",
    )
    args = parser.parse_args(argv)

    try:
        output = score_file(args.receipt, breakdown=args.breakdown)
    except (FileNotFoundError, ValidationError) as e:
        logger.error(f"Could not load receipt: {e}")
        return 2

    print(json.dumps(output, indent=2))
    return 1 if "error" in output else 0


if __name__ == "__main__":
    sys.exit(main())
