from typing import Optional, List
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship


# project_id columns below carry no foreign key: rows pointing at a deleted
# project stay and resolve to a null project name.


class Collaborator(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    daily_rate: Optional[float] = Field(default=None)

    projects: List["CollaboratorProject"] = Relationship(
        back_populates="collaborator",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "lazy": "selectin",
            "order_by": "CollaboratorProject.id",
        },
    )
    workloads: List["Workload"] = Relationship(
        back_populates="collaborator",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "lazy": "selectin",
            "order_by": "Workload.id",
        },
    )


class CollaboratorProject(SQLModel, table=True):
    """Static project assignment."""

    __tablename__ = "collaborator_project"

    id: Optional[int] = Field(default=None, primary_key=True)
    collaborator_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("collaborator.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    project_id: int = Field(index=True)
    static_days_worked: float = Field(default=0)

    collaborator: Optional[Collaborator] = Relationship(back_populates="projects")


class Workload(SQLModel, table=True):
    """Ledger line: days worked on a project for one month, plus the month comment slot."""

    __tablename__ = "workload"
    __table_args__ = (
        UniqueConstraint("collaborator_id", "project_id", "month", "year", name="uq_workload_period"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    collaborator_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("collaborator.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    # None marks a comment-only placeholder entry
    project_id: Optional[int] = Field(default=None, index=True)
    days_worked: float = Field(default=0)
    month: str = Field(max_length=2)
    year: int = Field(index=True)
    comment: str = Field(default="")

    collaborator: Optional[Collaborator] = Relationship(back_populates="workloads")
