"""
Laundry Request Model

A customer's pickup request. The selected services live in the
request_services table.

total_estimated_cost is the price snapshot taken at submission and is
never recomputed from the catalog.
"""

from sqlalchemy import Column, String, Text, Date, Numeric, CheckConstraint, Index
from sqlalchemy.orm import relationship

from database import DBBaseClass, DBBase


REQUEST_STATUSES = ("pending", "confirmed", "in_progress", "completed")


class LaundryRequest(DBBase, DBBaseClass):

    __tablename__ = "laundry_requests"

    # ============================================
    # CUSTOMER DETAILS
    # ============================================

    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(150), nullable=False)
    customer_phone = Column(String(30), nullable=False)

    # ============================================
    # PICKUP DETAILS
    # ============================================

    pickup_address = Column(String(200), nullable=False)
    pickup_date = Column(Date, nullable=False)
    pickup_time_slot = Column(String(20), nullable=False)
    special_instructions = Column(Text, nullable=True)

    # ============================================
    # BACK OFFICE
    # ============================================

    status = Column(String(20), nullable=False, default="pending")
    total_estimated_cost = Column(Numeric(10, 2), nullable=True)
    internal_notes = Column(Text, nullable=True)

    lines = relationship(
        "RequestService",
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint(
            "status in (%s)" % ", ".join(f"'{s}'" for s in REQUEST_STATUSES),
            name="ck_laundry_requests_status",
        ),
        Index("idx_laundry_requests_status", "status"),
        Index("idx_laundry_requests_pickup_date", "pickup_date"),
        Index("idx_laundry_requests_customer_name", "customer_name"),
        Index("idx_laundry_requests_created_at", "created_at"),
    )

    def to_dict(self):
        return {
            **super().to_dict(),
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "pickup_address": self.pickup_address,
            "pickup_date": self.pickup_date.isoformat() if self.pickup_date else None,
            "pickup_time_slot": self.pickup_time_slot,
            "special_instructions": self.special_instructions,
            "status": self.status,
            "total_estimated_cost": (
                round(float(self.total_estimated_cost), 2)
                if self.total_estimated_cost is not None
                else None
            ),
            "internal_notes": self.internal_notes,
        }
