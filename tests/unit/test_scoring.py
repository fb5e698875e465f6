"""得分测试"""
import pytest

from klondike.moves import SETUP_ACTION
from klondike.scoring import MAX_UTILITY, ScoreBreakdown, compute_breakdown, compute_returns
from klondike.state import SolitaireState


class TestScoring:
    """compute_breakdown 测试"""

    def test_max_utility(self):
        assert MAX_UTILITY == 3220.0

    def test_not_started(self):
        state = SolitaireState()
        state.apply_action(SETUP_ACTION)
        assert compute_breakdown(state) == ScoreBreakdown()
        assert compute_returns(state) == 0.0

    def test_components(self, make_state):
        state = make_state(
            tableaus=["?? ?? Kh", "?? Qs"],
            foundations=["As 2s"],
            waste="5d",
            stock="?? ??",
        )
        breakdown = compute_breakdown(state)
        assert breakdown.foundation == 190.0
        assert breakdown.tableau == (21 - 3) * 20
        assert breakdown.stock_waste == (24 - 3) * 20
        assert breakdown.total == 970.0
        assert state.returns() == breakdown.total

    def test_hidden_top_not_counted(self, make_state):
        state = make_state(tableaus=["?? ??"], stock="??")
        assert compute_breakdown(state).tableau == (21 - 1) * 20

    def test_full_foundations(self, make_state):
        state = make_state(foundations=[
            "As 2s 3s 4s 5s 6s 7s 8s 9s 10s Js Qs Ks",
            "Ah 2h 3h 4h 5h 6h 7h 8h 9h 10h Jh Qh Kh",
            "Ac 2c 3c 4c 5c 6c 7c 8c 9c 10c Jc Qc Kc",
            "Ad 2d 3d 4d 5d 6d 7d 8d 9d 10d Jd Qd Kd",
        ])
        assert compute_returns(state) == pytest.approx(MAX_UTILITY)
