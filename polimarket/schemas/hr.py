"""
HR Employee Schemas
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class EmployeeCreate(BaseModel):
    id: str
    name: str
    role: str
    department: str = "Recursos Humanos"
    email: Optional[str] = None
    phone: Optional[str] = None
    hired_at: Optional[datetime] = None

class EmployeeResponse(BaseModel):
    id: str
    name: str
    role: str
    department: str
    email: Optional[str]
    phone: Optional[str]
    hired_at: Optional[datetime]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
