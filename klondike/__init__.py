"""
Klondike Layer - 纯游戏逻辑 (无 ML 依赖)

Modules:
    errors: 异常定义
    cards: 牌定义与编码
    piles: 牌堆
    moves: 动作类型与编码
    rules: 规则引擎
    scoring: 得分计算
    state: 游戏状态
    game: 游戏描述
"""
from .errors import (
    SolitaireError,
    CardNotFoundError,
    InvalidCardIndexError,
    InvalidActionIdError,
    IllegalActionError,
    IllegalMoveError,
)

from .cards import (
    Rank,
    Suit,
    CardKind,
    Location,
    Card,
    FULL_DECK,
    NUM_CARDS,
    HIDDEN_CARD,
    NO_CARD,
    FOUNDATION_POINTS,
    cards_to_indices,
    cards_to_str,
    str_to_cards,
)

from .piles import Pile, Tableau, Foundation, StockWaste

from .moves import (
    ActionType,
    Move,
    MoveCodec,
    SETUP_ACTION,
    DRAW_ACTION,
    NUM_DISTINCT_ACTIONS,
    INVALID_ACTION,
    action_to_string,
    get_move_codec,
)

from .rules import RuleEngine, Placement

from .scoring import ScoreBreakdown, compute_breakdown, compute_returns

from .config import GameConfig

from .state import (
    Phase,
    SolitaireState,
    CHANCE_PLAYER_ID,
    PLAYER_ID,
    TERMINAL_PLAYER_ID,
)

from .game import SolitaireGame

__all__ = [
    # errors
    "SolitaireError",
    "CardNotFoundError",
    "InvalidCardIndexError",
    "InvalidActionIdError",
    "IllegalActionError",
    "IllegalMoveError",
    # cards
    "Rank",
    "Suit",
    "CardKind",
    "Location",
    "Card",
    "FULL_DECK",
    "NUM_CARDS",
    "HIDDEN_CARD",
    "NO_CARD",
    "FOUNDATION_POINTS",
    "cards_to_indices",
    "cards_to_str",
    "str_to_cards",
    # piles
    "Pile",
    "Tableau",
    "Foundation",
    "StockWaste",
    # moves
    "ActionType",
    "Move",
    "MoveCodec",
    "SETUP_ACTION",
    "DRAW_ACTION",
    "NUM_DISTINCT_ACTIONS",
    "INVALID_ACTION",
    "action_to_string",
    "get_move_codec",
    # rules
    "RuleEngine",
    "Placement",
    # scoring
    "ScoreBreakdown",
    "compute_breakdown",
    "compute_returns",
    # state
    "GameConfig",
    "Phase",
    "SolitaireState",
    "CHANCE_PLAYER_ID",
    "PLAYER_ID",
    "TERMINAL_PLAYER_ID",
    # game
    "SolitaireGame",
]
