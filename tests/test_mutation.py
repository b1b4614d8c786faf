from __future__ import annotations

import copy
import pickle

import pytest
from pydantic import ValidationError

from pyobskv import ABSENT, Absent, Mutation, MutationKind


def test_positional_and_keyword_construction_are_equivalent() -> None:
    positional = Mutation("speed", 10, 12)
    keyword = Mutation(key="speed", old_value=10, new_value=12)

    assert positional == keyword
    assert positional.key == "speed"
    assert positional.old_value == 10
    assert positional.new_value == 12


def test_mutation_is_frozen() -> None:
    mutation = Mutation("speed", 10, 12)

    with pytest.raises(ValidationError):
        mutation.new_value = 99  # type: ignore[misc]
    assert mutation.new_value == 12


def test_values_are_held_by_reference() -> None:
    old: list[int] = [1]
    new = {"nested": [2]}
    mutation = Mutation("k", old, new)

    assert mutation.old_value is old
    assert mutation.new_value is new


def test_opaque_token_keys_are_accepted() -> None:
    token = object()
    mutation = Mutation(token, ABSENT, "v")
    assert mutation.key is token


@pytest.mark.parametrize(
    ("old_value", "new_value", "kind"),
    [
        (ABSENT, 1, MutationKind.INSERT),
        (None, 1, MutationKind.UPDATE),
        (0, None, MutationKind.UPDATE),
        (1, ABSENT, MutationKind.DELETE),
    ],
)
def test_kind_is_derived_from_absent_sides(old_value: object, new_value: object, kind: MutationKind) -> None:
    mutation = Mutation("k", old_value, new_value)
    assert mutation.kind is kind
    assert mutation.is_delete is (kind is MutationKind.DELETE)


def test_omitted_values_default_to_absent() -> None:
    mutation = Mutation("k")
    assert mutation.old_value is ABSENT
    assert mutation.new_value is ABSENT


def test_absent_is_a_falsy_singleton() -> None:
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"
    assert isinstance(ABSENT, Absent)
    assert ABSENT is not None
    assert copy.copy(ABSENT) is ABSENT
    assert copy.deepcopy(ABSENT) is ABSENT
    assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT


def test_repr_shows_absent_marker() -> None:
    assert "new_value=ABSENT" in repr(Mutation("k", 1, ABSENT))
