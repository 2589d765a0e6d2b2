from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateCartRequest(BaseModel):
    product_id: int
    # zero or less removes the line
    quantity: int


class RemoveFromCartRequest(BaseModel):
    product_id: int
