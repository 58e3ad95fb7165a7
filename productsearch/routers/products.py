from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, File
from productsearch.dependencies import get_product_service
from productsearch.schemas.pagination import MAX_PAGE_SIZE, Page, PageCursor
from productsearch.schemas.product import Product, BulkSaveRequest
from productsearch.services.search_service import PagingSearchService
import productsearch.services.import_service as import_svc

router = APIRouter(prefix="/api/products", tags=["products"])

_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@router.get("/search", response_model=Page[Product])
def search_products(
    q: str = Query(..., min_length=1),
    size: int | None = Query(None, ge=1, le=MAX_PAGE_SIZE),
    svc: PagingSearchService[Product] = Depends(get_product_service),
):
    return svc.search(q, limit=size)


@router.post("/search/next", response_model=Page[Product])
def next_page(cursor: PageCursor, svc: PagingSearchService[Product] = Depends(get_product_service)):
    # Clients may post back the whole page they received; its items are ignored
    return svc.next(cursor.to_page())


@router.post("", response_model=Product, status_code=201)
def save_product(data: Product, svc: PagingSearchService[Product] = Depends(get_product_service)):
    return svc.save(data)


@router.post("/bulk", response_model=list[Product])
def save_products(data: BulkSaveRequest, svc: PagingSearchService[Product] = Depends(get_product_service)):
    return svc.save_all(data.products)


@router.post("/import")
async def import_products(
    request: Request,
    file: UploadFile = File(...),
    svc: PagingSearchService[Product] = Depends(get_product_service),
):
    if not file.filename or not file.filename.lower().endswith((".xlsx", ".xlsm")):
        raise HTTPException(status_code=400, detail="Unsupported file type. Upload an .xlsx or .xlsm workbook.")

    # Cheap Content-Length check before reading into memory
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > _MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large. The limit is 10 MB.")

    file_data = await file.read()
    if len(file_data) > _MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large. The limit is 10 MB.")

    return import_svc.import_products_from_excel(svc, file_data)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, svc: PagingSearchService[Product] = Depends(get_product_service)):
    product = svc.find_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
