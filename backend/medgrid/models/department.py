"""
Department model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import uuid

if TYPE_CHECKING:
    from medgrid.models.hospital import Hospital
    from medgrid.models.bed import Bed


class Department(SQLModel, table=True):
    """
    Department model.

    A clinical department of a hospital. Owns its beds; capacity is not
    stored but derived from them.
    """
    __tablename__ = "department"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    name: str
    code: str  # ER, ICU, MED, ...
    hospital_id: str = Field(foreign_key="hospital.id", index=True)
    description: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    hospital: "Hospital" = Relationship(back_populates="departments")
    beds: List["Bed"] = Relationship(back_populates="department")

    def __repr__(self) -> str:
        return f"Department(id={self.id}, name={self.name}, code={self.code})"
