"""Employee operations on top of the upstream directory.

The upstream is the source of truth; every call re-fetches what it needs and
aggregation (search, ranking, highest salary) happens in memory per request.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from app.core.exceptions import ErrorKind, UpstreamError
from app.models.employee import Employee, EmployeeInput
from app.models.upstream import DataShape, UpstreamEnvelope
from app.services.upstream_client import UpstreamClient, upstream_client

logger = logging.getLogger(__name__)

EMPLOYEES = "/employees"
EMPLOYEE = "/employee"
CREATE = "/create"
DELETE = "/delete"

TOP_EARNERS_LIMIT = 10

_INTEGER_STRING = re.compile(r"-?[0-9]+")


class InvalidEmployeeRecord(ValueError):
    pass


def _id_path(prefix: str, employee_id: str) -> str:
    # Ids come from a decoded path segment; "?", "#" or "/" must not reshape the upstream URL
    return f"{prefix}/{quote(employee_id, safe='')}"


def _coerce_int(value: Any, field: str) -> int:
    # bool is an int subclass, but True is not a salary
    if isinstance(value, bool):
        raise InvalidEmployeeRecord(f"{field} is not numeric: {value!r}")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    elif isinstance(value, str) and _INTEGER_STRING.fullmatch(value):
        result = int(value)
    else:
        raise InvalidEmployeeRecord(f"{field} is not numeric: {value!r}")

    if result < 0:
        raise InvalidEmployeeRecord(f"{field} is negative: {result}")
    return result


def to_employee(raw: Any) -> Employee:
    """Coerce one upstream employee object into an ``Employee``.

    Raises ``InvalidEmployeeRecord`` when the id, name or salary is unusable.
    """
    if not isinstance(raw, dict):
        raise InvalidEmployeeRecord(f"employee entry is not an object: {raw!r}")

    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)) or raw_id == "":
        raise InvalidEmployeeRecord(f"id is missing or invalid: {raw_id!r}")

    name = raw.get("employee_name")
    if not isinstance(name, str) or not name:
        raise InvalidEmployeeRecord(f"employee_name is missing for id={raw_id}")

    if "employee_salary" not in raw:
        raise InvalidEmployeeRecord(f"employee_salary is missing for id={raw_id}")
    salary = _coerce_int(raw["employee_salary"], "employee_salary")

    raw_age = raw.get("employee_age")
    age = 0 if raw_age is None or raw_age == "" else _coerce_int(raw_age, "employee_age")

    image = raw.get("profile_image")
    if image is None:
        image = ""
    elif not isinstance(image, str):
        raise InvalidEmployeeRecord(f"profile_image is not a string for id={raw_id}")

    return Employee(
        id=str(raw_id),
        employee_name=name,
        employee_salary=salary,
        employee_age=age,
        profile_image=image,
    )


def _parse_envelope(document: Any) -> UpstreamEnvelope:
    if not isinstance(document, dict):
        raise UpstreamError(
            ErrorKind.MALFORMED_RESPONSE,
            f"Expected a JSON object envelope, got {type(document).__name__}",
        )
    try:
        return UpstreamEnvelope.model_validate(document)
    except ValidationError as e:
        raise UpstreamError(ErrorKind.MALFORMED_RESPONSE, f"Invalid upstream envelope: {e}") from e


class EmployeeService:
    def __init__(self, client: UpstreamClient) -> None:
        self.client = client

    async def get_all_employees(self) -> list[Employee]:
        envelope = _parse_envelope(await self.client.get(EMPLOYEES))
        if envelope.shape is not DataShape.LIST:
            raise UpstreamError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Expected a JSON array at 'data', got {envelope.shape.value}",
            )

        employees: list[Employee] = []
        for index, raw in enumerate(envelope.data):
            try:
                employees.append(to_employee(raw))
            except InvalidEmployeeRecord as e:
                logger.warning("Skipping employee at index %d: %s", index, e)
        return employees

    async def get_employees_by_name_search(self, query: str) -> list[Employee]:
        needle = query.casefold()
        employees = await self.get_all_employees()
        return [e for e in employees if needle in e.employee_name.casefold()]

    async def get_employee_by_id(self, employee_id: str) -> Employee:
        envelope = _parse_envelope(await self.client.get(_id_path(EMPLOYEE, employee_id)))
        if envelope.shape is DataShape.ABSENT:
            raise UpstreamError(
                ErrorKind.NOT_FOUND,
                envelope.message or f"Employee with id '{employee_id}' not found",
            )
        return self._single_employee(envelope)

    async def get_highest_salary_of_employees(self) -> int:
        employees = await self.get_all_employees()
        return max((e.employee_salary for e in employees), default=0)

    async def get_top_ten_highest_earning_employee_names(self) -> list[str]:
        employees = await self.get_all_employees()
        # sorted() is stable with reverse=True: equal salaries keep upstream order
        ranked = sorted(employees, key=lambda e: e.employee_salary, reverse=True)
        return [e.employee_name for e in ranked[:TOP_EARNERS_LIMIT]]

    async def create_employee(self, employee_input: EmployeeInput) -> Employee:
        envelope = _parse_envelope(await self.client.post(CREATE, employee_input))
        employee = self._single_employee(envelope)
        logger.info("Created employee id=%s", employee.id)
        return employee

    async def delete_employee_by_id(self, employee_id: str) -> str:
        # Lookup then DELETE is not atomic; concurrent deletes of one id race.
        employee = await self.get_employee_by_id(employee_id)
        await self.client.delete(_id_path(DELETE, employee_id))
        logger.info("Deleted employee id=%s", employee_id)
        return employee.employee_name

    def _single_employee(self, envelope: UpstreamEnvelope) -> Employee:
        if envelope.shape is not DataShape.OBJECT:
            raise UpstreamError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Expected a JSON object at 'data', got {envelope.shape.value}",
            )
        try:
            return to_employee(envelope.data)
        except InvalidEmployeeRecord as e:
            raise UpstreamError(ErrorKind.MALFORMED_RESPONSE, str(e)) from e


employee_service = EmployeeService(upstream_client)
