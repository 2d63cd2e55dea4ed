# app/models/rms.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RMCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    is_active: bool = True
    is_on_leave: bool = False


class RMUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    is_on_leave: Optional[bool] = None


class RelationshipManager(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    is_active: bool = True
    is_on_leave: bool = False
    assigned_invoices: int = 0
    created_at: datetime

    class Config:
        from_attributes = True

    @property
    def is_eligible(self) -> bool:
        """Active and not on leave, i.e. can receive new invoices."""
        return self.is_active and not self.is_on_leave
