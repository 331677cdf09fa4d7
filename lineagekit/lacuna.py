"""Lacunas: descriptions of semantic gaps in translations between schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

_MAX_LACUNA_TYPE = 0xFFFF


class TranslationLacunas(Protocol):
    """Anything that can present the lacunas a translation emitted as a list."""

    def as_list(self) -> list["Lacuna"]: ...


@dataclass(frozen=True)
class FieldRef:
    """A field path and the value found in it."""

    path: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldRef":
        return cls(path=data["path"], value=data.get("value"))


@dataclass(frozen=True)
class Lacuna:
    """A gap in a lens's mapping that applied to one particular translation.

    ``type`` is a numeric class identifier in the range of an unsigned 16-bit int.
    """

    type: int
    message: str
    source_fields: tuple[FieldRef, ...] = field(default_factory=tuple)
    target_fields: tuple[FieldRef, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not 0 <= self.type <= _MAX_LACUNA_TYPE:
            raise ValueError(f"lacuna type {self.type} out of range 0..{_MAX_LACUNA_TYPE}")
        object.__setattr__(self, "source_fields", tuple(self.source_fields))
        object.__setattr__(self, "target_fields", tuple(self.target_fields))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty field lists are omitted."""
        out: dict[str, Any] = {}
        if self.source_fields:
            out["sourceFields"] = [ref.to_dict() for ref in self.source_fields]
        if self.target_fields:
            out["targetFields"] = [ref.to_dict() for ref in self.target_fields]
        out["type"] = self.type
        out["message"] = self.message
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lacuna":
        return cls(
            type=data["type"],
            message=data.get("message", ""),
            source_fields=tuple(FieldRef.from_dict(d) for d in data.get("sourceFields") or ()),
            target_fields=tuple(FieldRef.from_dict(d) for d in data.get("targetFields") or ()),
        )


class FlatLacunas(list):
    """A plain list of lacunas."""

    def as_list(self) -> list[Lacuna]:
        return list(self)