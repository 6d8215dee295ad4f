def normalize_barcode(value: object) -> str | None:
    if value is None:
        return None
    clean = str(value).strip()
    return clean or None


def unique_barcodes(values: list[object]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        barcode = normalize_barcode(value)
        if barcode:
            seen.setdefault(barcode, None)
    return list(seen)


def chunked(values: list[str], size: int) -> list[list[str]]:
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [values[i : i + size] for i in range(0, len(values), size)]
