from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from stockrecon.catalog.base import DiscrepancyEntry

QUANTITY_KEYS = ("quantity", "quantityDelta", "qty")
IS_OFFSET_KEYS = ("is_offset", "isOffset")
PARTNER_KEYS = ("offset_with_barcode", "offsetPartnerBarcode")
ENTRY_FIELD_KEYS = frozenset(("barcode", *QUANTITY_KEYS, *IS_OFFSET_KEYS, *PARTNER_KEYS))


class DiscrepancyItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    barcode: str | None = None
    quantity: float | None = Field(default=None, validation_alias=AliasChoices(*QUANTITY_KEYS))
    is_offset: bool = Field(default=False, validation_alias=AliasChoices(*IS_OFFSET_KEYS))
    offset_with_barcode: str | None = Field(default=None, validation_alias=AliasChoices(*PARTNER_KEYS))

    def to_entry(self) -> DiscrepancyEntry:
        return DiscrepancyEntry(
            barcode=self.barcode,
            quantity=self.quantity,
            is_offset=self.is_offset,
            offset_with_barcode=self.offset_with_barcode,
            extras={key: value for key, value in (self.model_extra or {}).items() if key not in ENTRY_FIELD_KEYS},
        )

    @classmethod
    def from_entry(cls, entry: DiscrepancyEntry) -> DiscrepancyItem:
        return cls(
            barcode=entry.barcode,
            quantity=entry.quantity,
            is_offset=entry.is_offset,
            offset_with_barcode=entry.offset_with_barcode,
            **entry.extras,
        )


class AnalyzeRequest(BaseModel):
    missing_items: list[DiscrepancyItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices("missingItems", "missing_items"),
    )
    over_items: list[DiscrepancyItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices("overItems", "over_items"),
    )


class AnalyzeData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analyzed_missing: list[DiscrepancyItem] = Field(alias="analyzedMissing")
    matched_count: int = Field(alias="matchedCount")


class AnalyzeResponse(BaseModel):
    success: bool = True
    data: AnalyzeData


class StockRequest(BaseModel):
    store_code: str | None = Field(default=None, validation_alias=AliasChoices("storeCode", "store_code"))


class StockResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    branch_name: str = Field(alias="branchName")
    total: int
    stock_map: dict[str, float] = Field(alias="stockMap")


def entries_from_items(items: list[DiscrepancyItem]) -> list[DiscrepancyEntry]:
    return [item.to_entry() for item in items]
