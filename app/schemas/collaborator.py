from typing import Annotated, List, Optional
from pydantic import BaseModel, Field, StringConstraints

# Zero-padded month, "01".."12"
Month = Annotated[str, StringConstraints(pattern=r"^(0[1-9]|1[0-2])$")]
Year = Annotated[int, Field(ge=1900, le=9999)]


class CollaboratorCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    projects: List[int] = Field(default_factory=list)
    daily_rate: Optional[float] = None


class CollaboratorUpdate(CollaboratorCreate):
    pass


class StaticProjectRead(BaseModel):
    id: int
    name: Optional[str]
    static_days_worked: float


class CollaboratorRead(BaseModel):
    id: int
    name: str
    daily_rate: Optional[float]
    projects: List[StaticProjectRead]


class MonthlyProjectRead(BaseModel):
    project_id: int
    name: Optional[str]
    days_worked: float


class CollaboratorMonthlyRead(BaseModel):
    id: int
    name: str
    daily_rate: Optional[float]
    month: str
    year: int
    comment: str
    projects: List[MonthlyProjectRead]


class DaysWorkedUpdate(BaseModel):
    project_id: int
    days: Optional[float] = None
    month: Month
    year: Year


class CommentUpdate(BaseModel):
    comment: str = ""
    month: Month
    year: Year


class DailyRateUpdate(BaseModel):
    daily_rate: Optional[float] = None


class CollaboratorRateRead(BaseModel):
    id: int
    name: str
    daily_rate: Optional[float]


class ExportRow(BaseModel):
    """One spreadsheet line of the monthly tracking export."""
    name: str
    projects: str
    days_per_project: str
    cost_per_project: str
    total_days: float
    total_cost: str
    comment: str
    month: str


class ExportResponse(BaseModel):
    file_name: str
    rows: List[ExportRow]
