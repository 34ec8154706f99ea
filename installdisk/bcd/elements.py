from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from ..errors import UnknownElementTypeError


class ElementFormat(IntEnum):
    DEVICE = 1
    STRING = 2
    OBJECT = 3
    OBJECT_LIST = 4
    INTEGER = 5
    BOOLEAN = 6
    INTEGER_LIST = 7


class ElementClass(IntEnum):
    LIBRARY = 1
    APPLICATION = 2
    DEVICE = 3
    HIDDEN = 4


@dataclass(frozen=True)
class ElementType:
    """A BCD element type code.

    Bits 28-31 hold the class, bits 24-27 the format and the low 24 bits the
    subtype, so the kind of value an element carries is implied by its code.
    """

    name: str
    code: int

    @property
    def element_class(self) -> ElementClass:
        return ElementClass((self.code >> 28) & 0xF)

    @property
    def element_format(self) -> ElementFormat:
        return ElementFormat((self.code >> 24) & 0xF)


def _build(*types: ElementType) -> Mapping[str, ElementType]:
    return MappingProxyType({t.name: t for t in types})


REGISTRY: Mapping[str, ElementType] = _build(
    ElementType("Timeout", 0x25000004),
    ElementType("DisplayBootMenu", 0x26000020),
    ElementType("DisplayOrder", 0x24000001),
    ElementType("Description", 0x12000004),
    ElementType("ApplicationDevice", 0x11000001),
    ElementType("OSDevice", 0x21000001),
)


def lookup(name: str) -> ElementType:
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownElementTypeError(f"Unknown BCD element type: {name!r}") from None
