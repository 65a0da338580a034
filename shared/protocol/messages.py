from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .commands import OpCode, normalize_opcode
from .constants import SPACE
from .errors import MalformedReplyError


class Command(BaseModel):
    """One request envelope. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    opcode: Union[OpCode, str] = Field(..., alias="Opcode", description="Operation name such as GetAddress")
    space: str = Field(default=SPACE, alias="Space", description="Addressing domain")
    flags: Optional[Tuple[str, ...]] = Field(default=None, alias="Flags")
    operands: Optional[Tuple[str, ...]] = Field(default=None, alias="Operands")

    @field_validator("flags", "operands", mode="before")
    @classmethod
    def _empty_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        value = tuple(value)
        return value or None

    @property
    def opcode_text(self) -> str:
        return normalize_opcode(self.opcode)

    @classmethod
    def build(
        cls,
        opcode: Union[OpCode, str],
        operands: Optional[Sequence[str]] = None,
        flags: Optional[Sequence[str]] = None,
    ) -> "Command":
        return cls(opcode=opcode, operands=operands, flags=flags)

    def to_wire(self) -> Dict[str, Any]:
        """Wire dict; fields without a value are left out entirely."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Reply(BaseModel):
    """Text answer from the device."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    results: List[str] = Field(default_factory=list, alias="Results")

    def first(self, default: str = "") -> str:
        return self.results[0] if self.results else default

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reply":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise MalformedReplyError(f"Reply validation failed: {exc}") from exc


__all__ = ["Command", "Reply"]
