"""
Import service: bulk product indexing from an Excel workbook.
Supports .xlsx and .xlsm (openpyxl).
"""
import io
import logging
from decimal import Decimal, InvalidOperation
from openpyxl import load_workbook

from productsearch.schemas.product import Product
from productsearch.services.search_service import PagingSearchService

logger = logging.getLogger(__name__)

# Normalized header text -> Product field
_COL_MAP = {
    "id": "id", "product id": "id",
    "name": "name", "product name": "name", "title": "name",
    "description": "description", "desc": "description",
    "price": "price", "unit price": "price",
    "stock": "stock_available", "stock available": "stock_available",
    "stock_available": "stock_available", "in stock": "stock_available",
}

_SHEET_NAME = "Products"
_IMPORT_MAX_ROWS = 2000


def _normalize(s: str) -> str:
    """Lowercase and strip a header cell. A trailing ``*`` marks a required column."""
    return str(s).lower().strip().rstrip("*").strip()


def _parse_price(value) -> float | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace("\xa0", "").replace(" ", "").replace(",", ".").lstrip("$€£").strip()
    if not s:
        return None
    try:
        return float(Decimal(s))
    except InvalidOperation:
        raise ValueError(f"invalid price {value!r}")


def _parse_stock(value) -> int | None:
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"invalid stock {value!r}")
        return int(value)
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        raise ValueError(f"invalid stock {value!r}")


def import_products_from_excel(service: PagingSearchService[Product], file_data: bytes) -> dict:
    """
    Parse an Excel workbook and index its rows as products.

    Returns a dict with:
      - success: bool
      - imported: int
      - skipped: int
      - errors: int
      - details: list[dict], one entry per data row
      - error: str (only when success=False)
    """
    try:
        wb = load_workbook(filename=io.BytesIO(file_data), data_only=True)
    except Exception as e:
        return {"success": False, "error": f"Could not read workbook: {e}", "imported": 0, "skipped": 0, "errors": 0, "details": []}

    ws = wb[_SHEET_NAME] if _SHEET_NAME in wb.sheetnames else wb.active

    # Header row is somewhere in the first 10 rows
    header_row = None
    col_map: dict[str, int] = {}  # field name -> column index (1-based)

    for row in ws.iter_rows(min_row=1, max_row=10):
        tmp_map: dict[str, int] = {}
        for cell in row:
            if cell.value is None:
                continue
            key = _normalize(str(cell.value))
            if key in _COL_MAP:
                tmp_map[_COL_MAP[key]] = cell.column
        if "name" in tmp_map:
            header_row = row[0].row
            col_map = tmp_map
            break

    if header_row is None:
        return {
            "success": False,
            "error": "Required column 'Name' not found in the first 10 rows.",
            "imported": 0, "skipped": 0, "errors": 0, "details": [],
        }

    def get_val(row_values: tuple, field: str):
        col = col_map.get(field)
        if col is None or col > len(row_values):
            return None
        return row_values[col - 1]

    results: list[dict] = []
    to_save: list[Product] = []
    saved_details: list[dict] = []

    for row_num, row_values in enumerate(
        ws.iter_rows(min_row=header_row + 1, values_only=True), start=header_row + 1
    ):
        if all(v is None or str(v).strip() == "" for v in row_values):
            continue
        if len(to_save) >= _IMPORT_MAX_ROWS:
            results.append({"row": row_num, "status": "skipped", "id": None, "name": None,
                             "reason": f"Row limit of {_IMPORT_MAX_ROWS} reached"})
            continue

        name_raw = get_val(row_values, "name")
        name = str(name_raw).strip() if name_raw is not None else ""
        if not name:
            results.append({"row": row_num, "status": "skipped", "id": None, "name": None,
                            "reason": "Empty name"})
            continue

        id_raw = get_val(row_values, "id")
        doc_id = str(id_raw).strip() if id_raw is not None and str(id_raw).strip() else None
        description = get_val(row_values, "description")

        try:
            price = _parse_price(get_val(row_values, "price"))
            stock = _parse_stock(get_val(row_values, "stock_available"))
        except ValueError as e:
            results.append({"row": row_num, "status": "error", "id": doc_id, "name": name, "reason": str(e)})
            continue

        product = Product(
            id=doc_id,
            name=name,
            description=str(description).strip() if description else None,
            price=price or 0.0,
            stock_available=stock or 0,
        )
        to_save.append(product)
        detail = {"row": row_num, "status": "imported", "id": doc_id, "name": name, "reason": ""}
        saved_details.append(detail)
        results.append(detail)

    if to_save:
        service.save_all(to_save)
        for detail, product in zip(saved_details, to_save):
            detail["id"] = product.id
        logger.info("Imported %d product(s) from workbook", len(to_save))

    return {
        "success": True,
        "imported": len(to_save),
        "skipped": len([r for r in results if r["status"] == "skipped"]),
        "errors": len([r for r in results if r["status"] == "error"]),
        "details": results,
    }
