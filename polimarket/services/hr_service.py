"""
HR Service - HR employee records
"""
from sqlalchemy.orm import Session
from typing import List

from polimarket.models import HREmployee
from polimarket.schemas.hr import EmployeeCreate

class HRService:
    
    @staticmethod
    def get_employees(db: Session, active_only: bool = True) -> List[HREmployee]:
        query = db.query(HREmployee)
        if active_only:
            query = query.filter(HREmployee.is_active == True)
        return query.order_by(HREmployee.id).all()
    
    @staticmethod
    def build_employee(employee_data: EmployeeCreate) -> HREmployee:
        return HREmployee(
            id=employee_data.id,
            name=employee_data.name,
            role=employee_data.role,
            department=employee_data.department,
            email=employee_data.email,
            phone=employee_data.phone,
            hired_at=employee_data.hired_at,
            is_active=True
        )
