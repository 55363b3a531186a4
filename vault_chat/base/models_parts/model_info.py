"""
Model catalog entry DTO.

Describes a selectable model in the chat panel's model picker.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class ModelInfo:
    """A selectable model.

    Attributes:
        id: Identifier sent on the wire.
        name: Display name.
        description: Short hint shown next to the name.
    """

    id: str
    name: str
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


__all__ = ["ModelInfo"]
