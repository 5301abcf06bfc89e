from typing import List, Optional
from pydantic import BaseModel


class RecapProjectRead(BaseModel):
    id: Optional[int]
    # None when the project was deleted after days were recorded
    name: Optional[str]
    total_cost: float


class RecapMonthRead(BaseModel):
    month: str
    year: int
    projects: List[RecapProjectRead]
    total_month_cost: float


class RecapResponse(BaseModel):
    year: int
    months: List[RecapMonthRead]
    total_year_cost: float
