"""
HR Employees API
"""
from fastapi import APIRouter, Depends, Query, status

from polimarket.api.deps import get_facade, respond
from polimarket.schemas.hr import EmployeeCreate, EmployeeResponse
from polimarket.services import BusinessFacade

router = APIRouter(prefix="/rh", tags=["RH"])


def _employee(e):
    return EmployeeResponse.model_validate(e)


@router.get("/empleados")
def list_employees(activos: bool = Query(True), facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.list_employees(active_only=activos), lambda employees: [_employee(e) for e in employees])

@router.get("/empleados/{employee_id}")
def get_employee(employee_id: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.get_employee(employee_id), _employee)

@router.post("/empleados")
def create_employee(data: EmployeeCreate, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.create_employee(data), _employee, status.HTTP_201_CREATED)

@router.delete("/empleados/{employee_id}")
def deactivate_employee(employee_id: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.deactivate_employee(employee_id))
