"""Employee models exposed by the gateway."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Create input is forwarded to the upstream untouched
EmployeeInput = dict[str, Any]


class Employee(BaseModel):
    """Canonical employee record returned to callers."""

    id: str
    employee_name: str = Field(..., min_length=1)
    employee_salary: int = Field(..., ge=0)
    employee_age: int = Field(0, ge=0)
    profile_image: str = ""
