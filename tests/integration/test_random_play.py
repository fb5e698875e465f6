"""随机对局测试: 在大量随机局面上检查不变量"""
import random

import pytest

from klondike.cards import NUM_CARDS
from klondike.errors import IllegalActionError
from klondike.game import SolitaireGame
from klondike.moves import ActionType, get_action_type, get_move_codec
from klondike.rules import RuleEngine
from klondike.scoring import MAX_UTILITY

MAX_ACTIONS = 600


def play_random(seed: int, check=None):
    """
    随机玩一局 (机会节点按分布采样，决策节点均匀采样)

    Args:
        seed: 随机种子
        check: 每个动作之后调用的检查函数

    Returns:
        最终状态
    """
    rng = random.Random(seed)
    state = SolitaireGame().new_initial_state()

    for _ in range(MAX_ACTIONS):
        if state.is_terminal():
            break
        if state.is_chance_node():
            actions, probs = zip(*state.chance_outcomes())
            action = rng.choices(actions, weights=probs)[0]
        else:
            action = rng.choice(state.legal_actions())
        state.apply_action(action)
        if check is not None:
            check(state)

    return state


def check_card_invariant(state):
    cards = state.physical_cards()
    assert len(cards) == NUM_CARDS
    known = [c for c in cards if c.is_known]
    assert len(set(known)) == len(known)


class TestRandomPlay:
    """随机对局测试"""

    @pytest.mark.parametrize("seed", range(10))
    def test_card_invariant(self, seed):
        play_random(seed, check_card_invariant)

    @pytest.mark.parametrize("seed", range(5))
    def test_decision_actions_have_visible_sources(self, seed):
        codec = get_move_codec()

        def check(state):
            if state.is_terminal() or state.is_chance_node():
                return
            index = RuleEngine.index_cards(state)
            for action in state.legal_actions():
                if get_action_type(action) != ActionType.MOVE:
                    continue
                source = index[codec.decode(action).source]
                assert not source.card.hidden

        play_random(seed, check)

    @pytest.mark.parametrize("seed", range(5))
    def test_returns_in_range(self, seed):
        def check(state):
            assert 0.0 <= state.returns() <= MAX_UTILITY

        play_random(seed, check)

    def test_revealed_cards_unique(self):
        state = play_random(11)
        reveals = [a for a in state.history if get_action_type(a) == ActionType.REVEAL]
        assert len(reveals) == len(set(reveals))
        assert len(reveals) == len(state.revealed)

    def test_terminal_state_is_final(self):
        for seed in range(20):
            state = play_random(seed)
            if state.is_terminal():
                assert state.legal_actions() == []
                with pytest.raises(IllegalActionError):
                    state.apply_action(53)
                return
        pytest.skip("no random game reached a terminal state")

    def test_clone_replays_identically(self):
        state = play_random(3)
        clone = state.clone()
        assert str(clone) == str(state)
        assert clone.history == state.history
        assert clone.returns() == state.returns()
