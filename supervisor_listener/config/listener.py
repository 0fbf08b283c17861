"""Listener configuration settings."""

from pydantic import BaseModel, Field, field_validator

from supervisor_listener.diagnostics import DEFAULT_PROCESS_TAG


class ListenerSettings(BaseModel):
    """Protocol loop configuration settings."""

    process_tag: str = Field(
        default=DEFAULT_PROCESS_TAG,
        description="Tag prefixed to every diagnostic line",
    )

    handlers: list[str] = Field(
        default_factory=list,
        description="Handler import paths ('package.module:attribute') in order of precedence",
    )

    raise_handler_faults: bool = Field(
        default=False,
        description="Stop the listener when a handler raises instead of answering FAIL",
    )

    @field_validator("handlers")
    @classmethod
    def validate_handler_paths(cls, v: list[str]) -> list[str]:
        """Require 'module:attribute' import paths."""
        for path in v:
            module, sep, attribute = path.partition(":")
            if not sep or not module or not attribute:
                raise ValueError(
                    f"Invalid handler path: {path}. Expected 'package.module:attribute'"
                )
        return v
