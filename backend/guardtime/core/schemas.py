"""Base DTOs and the enumerations shared by request models and the CLI."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Shift = Literal["Day Shift", "Night Shift", "Mid Shift"]
Mode = Literal["in", "out"]
Role = Literal["admin", "payroll", "timekeeper", "viewer"]


class RequestModel(BaseModel):
    """Client payloads: camelCase on the wire, unknown fields rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
