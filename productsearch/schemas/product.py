from pydantic import BaseModel, Field


class Product(BaseModel):
    id: str | None = None
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = 0.0
    stock_available: int = 0


class BulkSaveRequest(BaseModel):
    products: list[Product] = Field(..., min_length=1)
