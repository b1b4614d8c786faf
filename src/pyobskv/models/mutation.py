"""Mutation records delivered to store observers.

A :class:`Mutation` is an immutable snapshot of one committed change:
the affected key, the value it held before and the value it holds after.
Absence on either side is expressed with the :data:`ABSENT` sentinel, so
``None`` remains an ordinary value that can be stored and observed.
"""

from __future__ import annotations

import enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict


class Absent(enum.Enum):
    """Marker type for "no value associated with the key".

    The single member is exported as :data:`ABSENT`. Being an enum member
    it survives ``copy``, ``deepcopy`` and pickling as the same object,
    so ``value is ABSENT`` is always a reliable test.
    """

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = Absent.ABSENT
"""Sentinel returned for missing keys and used as ``new_value`` of deletions."""


class MutationKind(enum.StrEnum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class Mutation(BaseModel):
    """One committed change to an :class:`~pyobskv.store.ObservableStore`.

    Keys and values are opaque to the store: they are held by reference and
    never validated or copied.

    Usage::

        Mutation("speed", 10, 12)
        Mutation(key="speed", old_value=12, new_value=ABSENT)
    """

    model_config = ConfigDict(frozen=True)

    key: Any
    old_value: Any = ABSENT
    new_value: Any = ABSENT

    def __init__(
        self,
        key: Any,
        old_value: Any = ABSENT,
        new_value: Any = ABSENT,
        **data: Any,
    ) -> None:
        super().__init__(key=key, old_value=old_value, new_value=new_value, **data)

    @property
    def kind(self) -> MutationKind:
        if self.new_value is ABSENT:
            return MutationKind.DELETE
        if self.old_value is ABSENT:
            return MutationKind.INSERT
        return MutationKind.UPDATE

    @property
    def is_delete(self) -> bool:
        return self.new_value is ABSENT
