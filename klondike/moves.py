"""
动作类型定义与动作编码

动作空间 [0, 206):
- 0: Setup (发牌)
- 1-52: Reveal (翻开索引为 id - 1 的牌)
- 53: Draw (从 Stock 翻牌)
- 54-205: Move (移动牌，共 152 种 (目标牌, 源牌) 组合)
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .cards import Card, Rank, Suit, NUM_CARDS, OPPOSITE_SUITS
from .errors import InvalidActionIdError


class ActionType(IntEnum):
    """动作类型"""
    SETUP = 0    # 机会节点: 发牌
    REVEAL = 1   # 机会节点: 翻开一张暗牌
    DRAW = 2     # 从 Stock 翻牌到 Waste
    MOVE = 3     # 移动牌


SETUP_ACTION = 0
REVEAL_OFFSET = 1            # Reveal 的 ID 比牌索引大 1，使 0 可以留给 Setup
DRAW_ACTION = REVEAL_OFFSET + NUM_CARDS
MOVE_OFFSET = DRAW_ACTION + 1
NUM_MOVES = 152
NUM_DISTINCT_ACTIONS = MOVE_OFFSET + NUM_MOVES

# 无效动作的填充值
INVALID_ACTION = -1


def get_action_type(action_id: int) -> ActionType:
    """
    判断动作 ID 的类型

    Raises:
        InvalidActionIdError: ID 不在 [0, 206) 中
    """
    if action_id == SETUP_ACTION:
        return ActionType.SETUP
    if REVEAL_OFFSET <= action_id < DRAW_ACTION:
        return ActionType.REVEAL
    if action_id == DRAW_ACTION:
        return ActionType.DRAW
    if MOVE_OFFSET <= action_id < NUM_DISTINCT_ACTIONS:
        return ActionType.MOVE
    raise InvalidActionIdError(
        f"Invalid action id: {action_id}. Valid range: 0-{NUM_DISTINCT_ACTIONS - 1}"
    )


def reveal_action(card: Card) -> int:
    """翻开 card 对应的动作 ID"""
    return card.index + REVEAL_OFFSET


def revealed_card(action_id: int) -> Card:
    """
    Reveal 动作翻开的牌

    Raises:
        InvalidActionIdError: 不是 Reveal 动作
    """
    if get_action_type(action_id) != ActionType.REVEAL:
        raise InvalidActionIdError(f"Action {action_id} is not a reveal action")
    return Card.from_index(action_id - REVEAL_OFFSET)


@dataclass(frozen=True, slots=True)
class Move:
    """
    不可变的移动

    Attributes:
        target: 源牌将被放到其上的牌 (目标牌堆为空时是占位牌)
        source: 被移动的牌 (连同压在它上面的牌)
    """
    target: Card
    source: Card

    @classmethod
    def from_action_id(cls, action_id: int) -> 'Move':
        """从动作 ID 解码"""
        return get_move_codec().decode(action_id)

    @property
    def action_id(self) -> int:
        return get_move_codec().encode(self)

    def __str__(self) -> str:
        return f"{self.target} <- {self.source}"


class MoveCodec:
    """
    移动编码器

    在 (目标牌索引, 源牌索引) 与动作 ID 之间建立双向映射，
    只覆盖规则上可能生成的组合。
    """

    def __init__(self):
        self._move_to_idx: Dict[Tuple[int, int], int] = {}
        self._idx_to_move: Dict[int, Tuple[int, int]] = {}
        self._build_action_space()

    def _add(self, target: Card, source: Card, idx: int) -> int:
        key = (target.index, source.index)
        self._move_to_idx[key] = idx
        self._idx_to_move[idx] = key
        return idx + 1

    def _build_action_space(self):
        """
        构建完整移动空间

        分组编码:
        - 空 Tableau <- K: 4
        - Foundation (每种花色: 占位牌 <- A, A <- 2, ..., Q <- K): 52
        - Tableau (每种花色、点数 2-K，各有两种颜色相反的子牌): 96
        """
        idx = MOVE_OFFSET

        # 空 Tableau 只能接收 K
        tableau_base = Card.tableau_base()
        for suit in Suit:
            idx = self._add(tableau_base, Card(Rank.KING, suit), idx)

        # Foundation 同花色递增
        for suit in Suit:
            idx = self._add(Card.foundation_base(suit), Card(Rank.ACE, suit), idx)
            for rank in list(Rank)[:-1]:
                idx = self._add(Card(rank, suit), Card(Rank(rank + 1), suit), idx)

        # Tableau 红黑交替递减
        for suit in Suit:
            for rank in list(Rank)[1:]:
                for child_suit in OPPOSITE_SUITS[suit]:
                    idx = self._add(Card(rank, suit), Card(Rank(rank - 1), child_suit), idx)

        assert idx == NUM_DISTINCT_ACTIONS, idx

    @property
    def num_moves(self) -> int:
        """移动空间大小"""
        return len(self._idx_to_move)

    @property
    def action_ids(self) -> List[int]:
        return sorted(self._idx_to_move)

    def encode(self, move: Move) -> int:
        """
        将 Move 编码为动作 ID

        Raises:
            InvalidActionIdError: 该组合不可能合法
        """
        key = (move.target.index, move.source.index)
        try:
            return self._move_to_idx[key]
        except KeyError:
            raise InvalidActionIdError(f"Move {move} has no action id") from None

    def decode(self, idx: int) -> Move:
        """
        将动作 ID 解码为 Move (牌未定位)

        Raises:
            InvalidActionIdError: 不是移动动作
        """
        if idx not in self._idx_to_move:
            raise InvalidActionIdError(f"Action {idx} is not a move action")
        target_index, source_index = self._idx_to_move[idx]
        return Move(Card.from_index(target_index), Card.from_index(source_index))


def action_to_string(action_id: int) -> str:
    """
    动作的可读表示

    Returns:
        如 "Setup", "Reveal(As)", "Draw", "Move(Qh <- Js)"；无效 ID 返回 "Invalid(id)"
    """
    try:
        action_type = get_action_type(action_id)
    except InvalidActionIdError:
        return f"Invalid({action_id})"

    if action_type == ActionType.SETUP:
        return "Setup"
    if action_type == ActionType.REVEAL:
        return f"Reveal({revealed_card(action_id)})"
    if action_type == ActionType.DRAW:
        return "Draw"
    return f"Move({get_move_codec().decode(action_id)})"


# 全局单例
_move_codec: Optional[MoveCodec] = None


def get_move_codec() -> MoveCodec:
    """获取全局移动编码器"""
    global _move_codec
    if _move_codec is None:
        _move_codec = MoveCodec()
    return _move_codec
