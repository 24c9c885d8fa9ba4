"""Task duration value objects."""

from pydantic import Field, model_validator
from typing_extensions import Self

from ...shared.base import ValueObject


class InternalDuration(ValueObject):
    """Duration of a station task, in working minutes."""

    setup_minutes: int = Field(default=0, ge=0)
    run_minutes: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> Self:
        if self.total_minutes <= 0:
            raise ValueError("Internal task duration must be at least one minute")
        return self

    @property
    def total_minutes(self) -> int:
        return self.setup_minutes + self.run_minutes


class OutsourcedDuration(ValueObject):
    """Duration of a provider task, in whole open days of the provider."""

    open_days: int = Field(ge=1)
