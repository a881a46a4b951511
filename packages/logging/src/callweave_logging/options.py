"""LoggingInterceptorOptions — levels, message templates and stage names."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

_PREFIX = "%(type_name)s.%(method_name)s"
_ELAPSED = "Elapsed: %(elapsed).2fms"


class LoggingInterceptorOptions(BaseModel):
    """Immutable logging configuration, validated at construction.

    Templates use ``%``-style mapping keys and are formatted lazily by the
    ``logging`` module.  Available keys: ``type_name``, ``method_name``,
    ``stage``, ``parameters``, ``result`` and ``elapsed`` (ms).  Sequence
    elements reuse the result / done templates with the NEXT stage.

    Levels accept either an ``int`` or a standard level name (``"INFO"``).
    """

    model_config = ConfigDict(frozen=True)

    start_level: int = logging.DEBUG
    done_level: int = logging.INFO
    next_level: int = logging.DEBUG
    error_level: int = logging.ERROR

    start_message: str = f"{_PREFIX}() | %(stage)s"
    start_parameters_message: str = f"{_PREFIX}(%(parameters)s) | %(stage)s"
    done_message: str = f"{_PREFIX}() | %(stage)s. {_ELAPSED}"
    done_parameters_message: str = f"{_PREFIX}(%(parameters)s) | %(stage)s. {_ELAPSED}"
    result_message: str = f"{_PREFIX}() | %(stage)s = (%(result)s). {_ELAPSED}"
    result_parameters_message: str = (
        f"{_PREFIX}(%(parameters)s) | %(stage)s = (%(result)s). {_ELAPSED}"
    )
    error_message: str = f"{_PREFIX}() | %(stage)s. {_ELAPSED}"
    error_parameters_message: str = f"{_PREFIX}(%(parameters)s) | %(stage)s. {_ELAPSED}"

    start_stage: str = Field(default="START", min_length=1)
    done_stage: str = Field(default="DONE", min_length=1)
    complete_stage: str = Field(default="COMPLETE", min_length=1)
    result_stage: str = Field(default="RESULT", min_length=1)
    next_stage: str = Field(default="NEXT", min_length=1)
    error_stage: str = Field(default="ERROR", min_length=1)

    unknown_type_name: str = "UnknownType"

    @field_validator("start_level", "done_level", "next_level", "error_level", mode="before")
    @classmethod
    def _level_from_name(cls, value: object) -> object:
        if isinstance(value, str):
            level = logging.getLevelName(value.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown logging level {value!r}")
            return level
        return value
