from typing import Optional, Union
from decimal import Decimal

from pydantic import BaseModel, field_validator


class ServiceBaseModel(BaseModel):
    """
    Catalog editor payload. Prices stay loosely typed so the catalog
    validation rules can report them per field.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    price_per_item: Optional[Union[Decimal, str]] = None
    price_per_pound: Optional[Union[Decimal, str]] = None
    is_active: bool = True

    @field_validator("name", "description")
    @classmethod
    def sanitize_text_fields(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace; an empty description is stored as None"""
        if v is None:
            return v
        return v.strip()


class ServiceActiveModel(BaseModel):
    is_active: bool
