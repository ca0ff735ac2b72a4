from typing import List, Optional

from pydantic import BaseModel


class MostRequestedServiceModel(BaseModel):
    service_id: str
    name: str
    total_quantity: int


class DashboardSummaryModel(BaseModel):
    pending_count: int = 0
    today_count: int = 0
    month_revenue: float = 0.0
    most_requested_service: Optional[MostRequestedServiceModel] = None
    pending_requests: List[dict] = []
    recent_requests: List[dict] = []
