"""
Request Service Model
One row per selected service per laundry request.
"""

from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from database import DBBaseClass, DBBase


class RequestService(DBBase, DBBaseClass):

    __tablename__ = "request_services"

    request_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("laundry_requests.id", ondelete="CASCADE"),
        nullable=False,
    )

    # catalog entries cannot be removed while a line still points at them
    service_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("laundry_services.id", ondelete="RESTRICT"),
        nullable=False,
    )

    quantity = Column(Integer, nullable=False, default=1)
    estimated_cost = Column(Numeric(10, 2), nullable=True)

    request = relationship("LaundryRequest", back_populates="lines", lazy="noload")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_request_services_quantity"),
        Index("idx_request_services_request_id", "request_id"),
        Index("idx_request_services_service_id", "service_id"),
    )

    def to_dict(self):
        return {
            **super().to_dict(),
            "request_id": str(self.request_id),
            "service_id": str(self.service_id),
            "quantity": self.quantity,
            "estimated_cost": (
                round(float(self.estimated_cost), 2)
                if self.estimated_cost is not None
                else None
            ),
        }
