"""Validation schema for engine configuration."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

AUTO_PLAY_MODES = ("never", "won", "always")


class EngineConfig(BaseModel):
    seed: Optional[int] = Field(
        None,
        description="Seed for every deal. None draws a fresh random seed for each new game.",
    )
    auto_play: Literal["never", "won", "always"] = Field(
        "always",
        description="When cards are moved to the foundations automatically.",
    )
    auto_flip: bool = Field(True, description="Flip a lane's stack as soon as its cascade empties.")
    check_invariants: bool = Field(False, description="Verify the 156-card total after every mutation.")

    @field_validator("auto_play", mode="before")
    @classmethod
    def normalize_auto_play(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("Seed must be non-negative.")
        return value


def load_config(values: Optional[Mapping[str, Any]] = None) -> EngineConfig:
    return EngineConfig(**dict(values or {}))
