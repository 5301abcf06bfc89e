from typing import Annotated
from pydantic import BaseModel, StringConstraints


class ProjectCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProjectRead(BaseModel):
    id: int
    name: str
