import itertools
import logging

import pytest

from simon_says.game import Action, CWRotation
from simon_says.plan import ActionPlan


F, R, B, L, N = Action.FORWARD, Action.RIGHT, Action.BACKWARD, Action.LEFT, Action.NOTHING

MOVES = [F, R, B, L]


def all_plans(max_length: int, vocabulary=MOVES):
    for length in range(0, max_length + 1):
        for actions in itertools.product(vocabulary, repeat=length):
            yield ActionPlan(actions)


def test_plans_compare_structurally_and_lexicographically():
    assert ActionPlan([F, R]) == ActionPlan([F, R])
    assert ActionPlan([F, R]) == [F, R]
    assert ActionPlan([F, R]) < ActionPlan([F, L])
    assert ActionPlan([F]) < ActionPlan([F, F])
    assert min(ActionPlan([L]), ActionPlan([R, R])) == [R, R]


def test_add_respects_limit(caplog: pytest.LogCaptureFixture):
    plan = ActionPlan(limit=2)

    assert plan.add(F)
    assert plan.add(L)
    with caplog.at_level(logging.WARNING):
        assert not plan.add(R)

    assert plan == [F, L]
    assert "refusing to add" in caplog.text


def test_remove_out_of_range_is_logged_no_op(caplog: pytest.LogCaptureFixture):
    plan = ActionPlan([F, R, B])

    with caplog.at_level(logging.WARNING):
        assert plan.remove(3) is None
        assert plan.remove(-1) is None

    assert plan == [F, R, B]
    assert "invalid index" in caplog.text

    assert plan.remove(1) is R
    assert plan == [F, B]


def test_move_reorders_and_checks_bounds():
    plan = ActionPlan([F, R, B])

    assert plan.move(0, 2)
    assert plan == [R, B, F]
    assert not plan.move(0, 3)
    assert plan == [R, B, F]


def test_names_round_trip():
    plan = ActionPlan.from_names(["Forward", "left", "B"])

    assert plan == [F, L, B]
    assert plan.names() == ["Forward", "Left", "Backward"]


def test_shifted_rotates_right():
    plan = ActionPlan([F, R, B])

    assert plan.shifted(1) == [B, F, R]
    assert plan.shifted(3) == plan
    assert ActionPlan().shifted(2) == []


def test_canonical_rotation_makes_first_action_forward():
    plan = ActionPlan([L, F, B])

    assert plan.canonical_rotation() == [F, R, L]


def test_canonical_mirror_keeps_smaller_of_plan_and_mirror():
    assert ActionPlan([F, L]).canonical_mirror() == [F, R]
    assert ActionPlan([F, R]).canonical_mirror() == [F, R]


def test_canonical_phase_picks_smallest_cyclic_rotation():
    assert ActionPlan([R, B, F]).canonical_phase() == [F, R, B]


def test_empty_plan_is_its_own_canonical_form():
    assert ActionPlan().canonicalize() == []
    assert ActionPlan().canonical_rotation() == []
    assert ActionPlan().canonical_mirror() == []
    assert ActionPlan().canonical_phase() == []


@pytest.mark.parametrize("plan", list(all_plans(2)) + list(all_plans(4, [F, R, L])))
def test_mirror_is_an_involution(plan: ActionPlan):
    assert plan.mirrored().mirrored() == plan


@pytest.mark.parametrize("plan", list(all_plans(3)))
def test_canonicalize_is_idempotent(plan: ActionPlan):
    canonical = plan.canonicalize()

    assert canonical.canonicalize() == canonical


@pytest.mark.parametrize("plan", list(all_plans(3)))
def test_canonicalize_ignores_rotation_mirror_and_phase(plan: ActionPlan):
    canonical = plan.canonicalize()

    for rotation in CWRotation:
        assert plan.rotated(rotation).canonicalize() == canonical
    assert plan.mirrored().canonicalize() == canonical
    for count in range(len(plan)):
        assert plan.shifted(count).canonicalize() == canonical


@pytest.mark.parametrize("plan", list(all_plans(3, [F, R, N])))
def test_canonicalize_handles_nothing(plan: ActionPlan):
    canonical = plan.canonicalize()

    assert canonical.canonicalize() == canonical
    for rotation in CWRotation:
        assert plan.rotated(rotation).canonicalize() == canonical
    for count in range(len(plan)):
        assert plan.shifted(count).canonicalize() == canonical


def test_phase_shifted_plans_share_a_canonical_form():
    assert ActionPlan([R, F, F]).canonicalize() == ActionPlan([F, F, R]).canonicalize()
    assert ActionPlan([F, F, R]).canonicalize() == [F, F, R]


def test_symmetry_classes_by_consecutive_turns():
    assert ActionPlan([F, F, R]).canonicalize() != ActionPlan([F, F, F]).canonicalize()
    assert ActionPlan([F, R, R]).canonicalize() == ActionPlan([F, F, R]).canonicalize()
    assert ActionPlan([F, B]).canonicalize() != ActionPlan([F, F]).canonicalize()


def test_canonical_classes_partition_short_plans():
    classes = {plan.canonicalize().key() for plan in all_plans(2) if len(plan) == 2}

    # [F, F], [F, R] and [F, B] up to rotation, mirror and phase.
    assert classes == {(F, F), (F, R), (F, B)}
