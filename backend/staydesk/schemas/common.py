from typing import ClassVar

from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """Body for PUT routes applied with model_dump(exclude_unset=True).

    Fields listed in `required_fields` may be omitted but not sent as null.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = sorted(f for f in self.required_fields if f in self.model_fields_set and getattr(self, f) is None)
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self
