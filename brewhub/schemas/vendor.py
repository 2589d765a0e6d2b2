from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class VendorApplicationRequest(BaseModel):
    business_name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=50)


class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None


class VendorTermsRequest(BaseModel):
    delivery_fee: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    min_order: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    delivery_time: Optional[str] = None


class OnlineRequest(BaseModel):
    online: bool
