from __future__ import annotations

import logging
from dataclasses import dataclass

from stockrecon.catalog.base import CatalogResult, CatalogSource, DiscrepancyEntry
from stockrecon.matching.engine import OffsetReconciler, ReconcileResult

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    reconcile: ReconcileResult
    catalog: CatalogResult

    @property
    def matched_count(self) -> int:
        return self.reconcile.matched_count


class RecoveryAnalysis:
    def __init__(self, catalog: CatalogSource, reconciler: OffsetReconciler | None = None) -> None:
        self.catalog = catalog
        self.reconciler = reconciler or OffsetReconciler()

    def run(self, missing: list[DiscrepancyEntry], over: list[DiscrepancyEntry]) -> AnalysisResult:
        logger.info("Analyzing recovery: %s missing, %s over items", len(missing), len(over))

        barcodes = [entry.barcode for entry in [*missing, *over] if entry.barcode]
        catalog_result = self.catalog.lookup(barcodes)
        if catalog_result.failed_barcodes:
            logger.warning(
                "%s barcodes left unresolved by failed catalog batches; their entries cannot be offset",
                len(catalog_result.failed_barcodes),
            )

        reconciled = self.reconciler.reconcile(missing, over, catalog_result.meta)
        logger.info("Matched %s offset pairs", reconciled.matched_count)
        return AnalysisResult(reconcile=reconciled, catalog=catalog_result)
