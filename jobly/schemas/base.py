"""
Shared helpers for request payload schemas.
"""

from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jobly.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class PayloadModel(BaseModel):
    """
    Base for incoming payloads.

    Fields are declared in snake_case with camelCase aliases; unknown keys are rejected.
    """

    class Config:
        populate_by_name = True
        extra = "forbid"

    def to_data(self) -> dict:
        """Supplied fields only, keyed by their camelCase names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


def parse_payload(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validate plain data against a schema.

    Raises:
        ValidationError: With pydantic's error list attached as ``errors``
    """
    if isinstance(data, schema):
        return data
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError(f"Expected an object, got {type(data).__name__}")
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as e:
        errors = e.errors(include_url=False)
        fields = ", ".join(".".join(str(part) for part in err["loc"]) or "body" for err in errors)
        raise ValidationError(f"Invalid {schema.__name__}: {fields}", errors=errors) from e
