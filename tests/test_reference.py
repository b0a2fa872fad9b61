"""Tests for deferred container references."""

import dataclasses

import pytest

from tests.fakes import Clock
from wirebox.reference import Reference, ref


def test_reference_keeps_target() -> None:
    reference = Reference("foo")

    assert reference.get_target() == "foo"
    assert reference.target == "foo"


def test_ref_helper_builds_reference() -> None:
    assert ref(Clock) == Reference(Clock)


def test_reference_is_immutable() -> None:
    reference = ref("foo")

    with pytest.raises(dataclasses.FrozenInstanceError):
        reference.target = "bar"  # type: ignore[misc]
