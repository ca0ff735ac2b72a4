"""
Laundry Service Model
Catalog entries offered on the pickup request form.

A service is priced either per item or per pound. When both prices are
set the per-item price is used.
"""

from sqlalchemy import Column, String, Text, Numeric, Boolean, Index

from database import DBBaseClass, DBBase


class LaundryService(DBBase, DBBaseClass):

    __tablename__ = "laundry_services"

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    # 2 decimal places for prices
    price_per_item = Column(Numeric(10, 2), nullable=True)
    price_per_pound = Column(Numeric(10, 2), nullable=True)

    # archived services stay referenced by historical request lines
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_laundry_services_is_active", "is_active"),)

    def to_dict(self):
        return {
            **super().to_dict(),
            "name": self.name,
            "description": self.description,
            "price_per_item": (
                round(float(self.price_per_item), 2)
                if self.price_per_item is not None
                else None
            ),
            "price_per_pound": (
                round(float(self.price_per_pound), 2)
                if self.price_per_pound is not None
                else None
            ),
            "is_active": bool(self.is_active),
        }
