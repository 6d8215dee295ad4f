from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from stockrecon.catalog.base import CatalogSource
from stockrecon.catalog.fixture import FixtureCatalog
from stockrecon.config import get_settings
from stockrecon.schemas.recovery import AnalyzeRequest, StockRequest
from stockrecon.services.recovery import analyze_recovery, analyze_with_catalog, branch_stock


def run_analyze(input_path: Path, catalog_mode: str, fixture_path: Path | None) -> dict[str, object]:
    payload = AnalyzeRequest.model_validate(json.loads(input_path.read_text(encoding="utf-8")))
    if catalog_mode == "fixture":
        if fixture_path is None:
            raise ValueError("--fixture is required with --catalog fixture")
        catalog: CatalogSource = FixtureCatalog(fixture_path)
        response = analyze_with_catalog(payload, catalog)
    else:
        response = analyze_recovery(payload, get_settings())
    return response.model_dump(by_alias=True)


def run_stock(store_code: str) -> dict[str, object]:
    response = branch_stock(StockRequest(store_code=store_code), get_settings())
    return response.model_dump(by_alias=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Stock recovery reconciliation tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Offset missing items against surplus items")
    analyze.add_argument("--input", required=True, type=Path, help="JSON file with missingItems and overItems")
    analyze.add_argument("--catalog", default="live", choices=["live", "fixture"])
    analyze.add_argument("--fixture", type=Path, help="JSON dump of catalog products for --catalog fixture")

    stock = subparsers.add_parser("stock", help="Fetch the on-hand stock map for a store")
    stock.add_argument("--store", required=True, help="Store code or branch name")

    args = parser.parse_args()
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "analyze":
        output = run_analyze(args.input, args.catalog, args.fixture)
    else:
        output = run_stock(args.store)
    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
