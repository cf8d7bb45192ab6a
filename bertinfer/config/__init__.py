"""Configuration system: turning JSON and CLI input into validated objects.

The classifier's hyperparameters come from a Hugging Face style config.json
and the run parameters come from the command line. Both are validated into
Pydantic models so that a bad head count or label map fails early with a
clear message instead of deep inside the forward pass.
"""
from __future__ import annotations

import enum
from typing import Annotated, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict


T = TypeVar("T")


class ValidationType(enum.Enum):
    """Types of value validation we support."""

    SHOULD_BE_POSITIVE = "should_be_positive"


class Config(BaseModel):
    """Base class for all configuration objects.

    Configs are immutable once validated and ignore keys they do not know,
    since upstream config files carry many fields we never read.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @staticmethod
    def check(left: T, validation_type: ValidationType) -> T:
        """Validate a value against a constraint, raising ValueError on failure."""
        match validation_type:
            case ValidationType.SHOULD_BE_POSITIVE:
                if left <= 0:  # type: ignore[operator]
                    raise ValueError(
                        f"Validation failed: {validation_type.name}: {left!r} <= 0"
                    )
                return left
            case _:
                raise ValueError(
                    f"Validation failed: unknown validation type {validation_type}"
                )


# Validated primitives for config fields
PositiveInt = Annotated[
    int,
    AfterValidator(lambda v: Config.check(v, ValidationType.SHOULD_BE_POSITIVE)),
]
PositiveFloat = Annotated[
    float,
    AfterValidator(lambda v: Config.check(v, ValidationType.SHOULD_BE_POSITIVE)),
]
