"""Unit tests for operator-driven contract status transitions."""

import pytest

from clausewise.exceptions import InvalidStatusTransitionError
from clausewise.models import ContractStatus
from clausewise.services.contract_service import check_transition


class TestContractStatusTransitions:

    def test_status_values(self):
        assert [s.value for s in ContractStatus] == ["pending", "processing", "completed", "expired"]

    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "processing"),
            ("processing", "completed"),
            ("pending", "completed"),
        ],
    )
    def test_forward_moves_are_allowed(self, current, target):
        check_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("processing", "pending"),
            ("completed", "processing"),
            ("completed", "completed"),
            ("pending", "pending"),
        ],
    )
    def test_backward_and_repeated_moves_are_rejected(self, current, target):
        with pytest.raises(InvalidStatusTransitionError):
            check_transition(current, target)

    @pytest.mark.parametrize("target", ["processing", "completed"])
    def test_expired_is_terminal(self, target):
        with pytest.raises(InvalidStatusTransitionError):
            check_transition("expired", target)
