"""
Pydantic models for dashboard responses.
"""
from pydantic import BaseModel


class StatusCount(BaseModel):
    """Number of assets whose stored status is one catalog value."""
    value: str
    label: str
    color: str | None = None
    count: int = 0


class MonthlyCount(BaseModel):
    month: int
    label: str
    count: int = 0


class DashboardOverview(BaseModel):
    """Counts over the assets and workflow rows visible to the caller."""
    department_id: int | None = None
    total_assets: int = 0
    status_breakdown: list[StatusCount] = []
    uncatalogued_assets: int = 0
    pending_transfers_in: int = 0
    pending_transfers_out: int = 0
    unconfirmed_audits: int = 0
    year: int
    monthly_acquisitions: list[MonthlyCount] = []
