from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from app.core.dependencies import get_employee_service
from app.models.employee import Employee
from app.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])

# Static paths must be registered before "/{employee_id}"


@router.get("", response_model=list[Employee])
async def get_all_employees(
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.get_all_employees()


@router.get("/search/{search_string}", response_model=list[Employee])
async def get_employees_by_name_search(
    search_string: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.get_employees_by_name_search(search_string)


@router.get("/highestSalary", response_model=int)
async def get_highest_salary_of_employees(
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.get_highest_salary_of_employees()


@router.get("/topTenHighestEarningEmployeeNames", response_model=list[str])
async def get_top_ten_highest_earning_employee_names(
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.get_top_ten_highest_earning_employee_names()


@router.get("/{employee_id}", response_model=Employee)
async def get_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.get_employee_by_id(employee_id)


@router.post("", response_model=Employee)
async def create_employee(
    employee_input: dict[str, Any] = Body(...),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.create_employee(employee_input)


@router.delete("/{employee_id}", response_class=PlainTextResponse)
async def delete_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    name = await service.delete_employee_by_id(employee_id)
    return PlainTextResponse(name)
