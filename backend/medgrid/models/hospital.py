"""
Hospital model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import List, TYPE_CHECKING
from datetime import datetime
import uuid

if TYPE_CHECKING:
    from medgrid.models.department import Department


class Hospital(SQLModel, table=True):
    """
    Hospital model.

    A tenant of the system and the broadcast scope for dashboard updates.
    """
    __tablename__ = "hospital"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    name: str = Field(index=True)
    code: str = Field(unique=True)  # MGH, NORTH, ...
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    departments: List["Department"] = Relationship(back_populates="hospital")

    def __repr__(self) -> str:
        return f"Hospital(id={self.id}, name={self.name}, code={self.code})"
