"""动作编码测试"""
import pytest

from klondike.cards import Card, Suit
from klondike.errors import InvalidActionIdError
from klondike.moves import (
    ActionType,
    Move,
    MoveCodec,
    DRAW_ACTION,
    MOVE_OFFSET,
    NUM_DISTINCT_ACTIONS,
    NUM_MOVES,
    SETUP_ACTION,
    action_to_string,
    get_action_type,
    get_move_codec,
    reveal_action,
    revealed_card,
)


class TestActionIds:
    """保留动作 ID 测试"""

    def test_constants(self):
        assert SETUP_ACTION == 0
        assert DRAW_ACTION == 53
        assert MOVE_OFFSET == 54
        assert NUM_MOVES == 152
        assert NUM_DISTINCT_ACTIONS == 206

    @pytest.mark.parametrize("action_id,expected", [
        (0, ActionType.SETUP),
        (1, ActionType.REVEAL),
        (52, ActionType.REVEAL),
        (53, ActionType.DRAW),
        (54, ActionType.MOVE),
        (205, ActionType.MOVE),
    ])
    def test_action_type(self, action_id, expected):
        assert get_action_type(action_id) == expected

    @pytest.mark.parametrize("action_id", [-1, 206, 1000])
    def test_invalid_action_type(self, action_id):
        with pytest.raises(InvalidActionIdError):
            get_action_type(action_id)

    def test_reveal_ids(self):
        assert reveal_action(Card.from_str("As")) == 1
        assert reveal_action(Card.from_str("Ah")) == 14
        assert reveal_action(Card.from_str("Kd")) == 52
        assert revealed_card(14) == Card.from_str("Ah")

    def test_revealed_card_rejects_other_actions(self):
        with pytest.raises(InvalidActionIdError):
            revealed_card(DRAW_ACTION)


class TestMoveCodec:
    """MoveCodec 测试"""

    def test_size(self):
        codec = MoveCodec()
        assert codec.num_moves == 152
        assert codec.action_ids == list(range(54, 206))

    def test_singleton(self):
        assert get_move_codec() is get_move_codec()

    @pytest.mark.parametrize("action_id,expected", [
        (54, "__ <- Ks"),
        (57, "__ <- Kd"),
        (58, "_s <- As"),
        (59, "As <- 2s"),
        (70, "Qs <- Ks"),
        (71, "_h <- Ah"),
        (109, "Qd <- Kd"),
        (110, "2s <- Ah"),
        (111, "2s <- Ad"),
        (134, "2h <- As"),
        (135, "2h <- Ac"),
        (204, "Kd <- Qs"),
        (205, "Kd <- Qc"),
    ])
    def test_decode(self, action_id, expected):
        assert str(get_move_codec().decode(action_id)) == expected

    def test_round_trip(self):
        codec = get_move_codec()
        for action_id in codec.action_ids:
            assert codec.encode(codec.decode(action_id)) == action_id

    def test_encode_ignores_location(self):
        move = Move(Card.foundation_base(Suit.SPADES), Card.from_str("As"))
        assert move.action_id == 58
        assert Move.from_action_id(58) == move

    def test_encode_impossible_move(self):
        with pytest.raises(InvalidActionIdError):
            get_move_codec().encode(Move(Card.from_str("Ks"), Card.from_str("Qs")))

    @pytest.mark.parametrize("action_id", [0, 1, 53, 206])
    def test_decode_non_move(self, action_id):
        with pytest.raises(InvalidActionIdError):
            get_move_codec().decode(action_id)


class TestActionToString:
    """action_to_string 测试"""

    @pytest.mark.parametrize("action_id,expected", [
        (0, "Setup"),
        (1, "Reveal(As)"),
        (52, "Reveal(Kd)"),
        (53, "Draw"),
        (54, "Move(__ <- Ks)"),
        (58, "Move(_s <- As)"),
        (205, "Move(Kd <- Qc)"),
        (206, "Invalid(206)"),
        (-1, "Invalid(-1)"),
    ])
    def test_strings(self, action_id, expected):
        assert action_to_string(action_id) == expected
