from __future__ import annotations

from dataclasses import dataclass, field, replace

from stockrecon.catalog.base import DiscrepancyEntry, MatchedPair, ProductMeta
from stockrecon.matching.normalization import normalize_barcode


@dataclass
class ReconcileResult:
    analyzed_missing: list[DiscrepancyEntry]
    pairs: list[MatchedPair] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return len(self.pairs)


class OffsetReconciler:
    """Pairs missing stock with surplus stock of the same category and price.

    Matching is greedy and first-fit: missing entries are visited in list
    order and each takes the earliest unclaimed surplus entry that shares its
    ``category_id`` and ``base_price`` exactly. This is not a maximum or
    minimum-cost assignment. Entries already marked offset, or whose barcode
    has no catalog metadata, are passed through untouched. Inputs are never
    mutated; annotated copies are returned.
    """

    def reconcile(
        self,
        missing: list[DiscrepancyEntry],
        over: list[DiscrepancyEntry],
        meta: dict[str, ProductMeta],
    ) -> ReconcileResult:
        claimed = [entry.is_offset for entry in over]
        result = ReconcileResult(analyzed_missing=[])

        for entry in missing:
            entry_meta = self._meta_for(entry, meta)
            if entry.is_offset or entry_meta is None:
                result.analyzed_missing.append(entry)
                continue

            partner_idx = self._first_fit(entry_meta, over, claimed, meta)
            if partner_idx is None:
                result.analyzed_missing.append(entry)
                continue

            partner = over[partner_idx]
            partner_barcode = normalize_barcode(partner.barcode)
            claimed[partner_idx] = True
            result.analyzed_missing.append(replace(entry, is_offset=True, offset_with_barcode=partner_barcode))
            result.pairs.append(MatchedPair(missing_barcode=normalize_barcode(entry.barcode), over_barcode=partner_barcode))

        return result

    def _first_fit(
        self,
        target: ProductMeta,
        over: list[DiscrepancyEntry],
        claimed: list[bool],
        meta: dict[str, ProductMeta],
    ) -> int | None:
        for idx, candidate in enumerate(over):
            if claimed[idx]:
                continue
            candidate_meta = self._meta_for(candidate, meta)
            if candidate_meta is None:
                continue
            if candidate_meta.category_id == target.category_id and candidate_meta.base_price == target.base_price:
                return idx
        return None

    @staticmethod
    def _meta_for(entry: DiscrepancyEntry, meta: dict[str, ProductMeta]) -> ProductMeta | None:
        barcode = normalize_barcode(entry.barcode)
        if not barcode:
            return None
        return meta.get(barcode)
