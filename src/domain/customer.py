"""Customer and Court Domain Entities

Owned by the booking side of the system. Billing only reads them.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, IdType, generate_uuid


class Customer(BaseModel, table=True):
    """Customer - a paying member of the facility"""

    __tablename__ = "customers"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Customer identifier"
    )

    name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Display name"
    )

    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
        description="Contact email"
    )

    phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Contact phone"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Customer creation timestamp"
    )


class Court(BaseModel, table=True):
    """Court - a bookable facility"""

    __tablename__ = "courts"

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Court identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Court display name"
    )
