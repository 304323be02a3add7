"""Envelope returned by the upstream employee directory."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class DataShape(str, Enum):
    LIST = "list"
    OBJECT = "object"
    ABSENT = "absent"
    SCALAR = "scalar"


class UpstreamEnvelope(BaseModel):
    """``{status, data, message}`` wrapper.

    ``status`` is advisory only, the HTTP status code decides success.
    ``data`` is an array on the list endpoint, an object on by-id and
    create, and absent on delete.
    """

    status: str | None = None
    data: Any = None
    message: str | None = None

    model_config = {"extra": "ignore"}

    @property
    def shape(self) -> DataShape:
        if self.data is None:
            return DataShape.ABSENT
        if isinstance(self.data, list):
            return DataShape.LIST
        if isinstance(self.data, dict):
            return DataShape.OBJECT
        return DataShape.SCALAR
