"""StringLayout: maps kora string numbers to a side and a position from the bass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class StringSide(Enum):
    """
    The two string ranks of a kora.

    Member order is the canonical sort order: Left before Right.
    """

    LEFT = "L"
    RIGHT = "R"

    @property
    def short_label(self) -> str:
        return self.value

    @property
    def order(self) -> int:
        return _SIDE_ORDER[self]


_SIDE_ORDER: dict[StringSide, int] = {side: index for index, side in enumerate(StringSide)}


@dataclass(frozen=True)
class StringRole:
    """
    Where a string sits on the instrument.

    Attributes:
        side:              Left or Right rank.
        position_from_low: 1-based position counted from the lowest string
                           on that side.
    """

    side: StringSide
    position_from_low: int

    def as_label(self) -> str:
        """Short label such as ``'L1'`` or ``'R10'``."""
        return f"{self.side.short_label}{self.position_from_low}"

    def sort_key(self) -> tuple[int, int]:
        return (self.side.order, self.position_from_low)


@dataclass(frozen=True)
class SideLayout:
    """Low-to-high string numbers for each side of one instrument size."""

    left_order: tuple[int, ...]
    right_order: tuple[int, ...]
    roles: Mapping[int, StringRole] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        roles: dict[int, StringRole] = {}
        for index, string_number in enumerate(self.left_order):
            roles[string_number] = StringRole(StringSide.LEFT, index + 1)
        for index, string_number in enumerate(self.right_order):
            roles[string_number] = StringRole(StringSide.RIGHT, index + 1)
        object.__setattr__(self, "roles", MappingProxyType(roles))


class StringLayout:
    """
    Read-only topology lookup for one or more instrument sizes.

    String counts without a predefined layout use the fallback: odd string
    numbers on the Left, even on the Right, numbered sequentially up each side.
    """

    def __init__(self, layouts: Mapping[int, SideLayout]) -> None:
        self._layouts: Mapping[int, SideLayout] = MappingProxyType(dict(layouts))

    def left_order(self, string_count: int) -> tuple[int, ...]:
        layout = self._layouts.get(string_count)
        if layout is not None:
            return layout.left_order
        return tuple(n for n in range(1, string_count + 1) if n % 2 == 1)

    def right_order(self, string_count: int) -> tuple[int, ...]:
        layout = self._layouts.get(string_count)
        if layout is not None:
            return layout.right_order
        return tuple(n for n in range(1, string_count + 1) if n % 2 == 0)

    def role_for(self, string_count: int, string_number: int) -> StringRole:
        """Return the side and position of ``string_number`` on a ``string_count`` kora."""
        layout = self._layouts.get(string_count)
        if layout is not None and string_number in layout.roles:
            return layout.roles[string_number]

        if string_number % 2 == 1:
            return StringRole(StringSide.LEFT, string_number // 2 + 1)
        return StringRole(StringSide.RIGHT, string_number // 2)


# ── Predefined layouts ──────────────────────────────────────────────────────

#: 21-string kora, F reference (low -> high on each side):
#:   L: F C D E G Bb D F A C E
#:   R: F A C E G Bb D F G A
KORA_21 = SideLayout(
    left_order=(1, 2, 3, 4, 6, 8, 10, 12, 14, 16, 18),
    right_order=(5, 7, 9, 11, 13, 15, 17, 19, 20, 21),
)

#: 22-string kora adds a low Bb on the Right:
#:   L: F C D E G Bb D F A C E
#:   R: Bb F A C E G Bb D F G A
KORA_22 = SideLayout(
    left_order=(1, 3, 4, 5, 7, 9, 11, 13, 15, 17, 19),
    right_order=(2, 6, 8, 10, 12, 14, 16, 18, 20, 21, 22),
)

DEFAULT_LAYOUT = StringLayout({21: KORA_21, 22: KORA_22})
