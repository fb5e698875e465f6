"""
游戏描述 - 静态参数与初始状态工厂
"""
from typing import Optional, Tuple
import logging

from .cards import FOUNDATION_SLOTS, STOCK_SLOTS, TABLEAU_SLOTS, WASTE_SLOTS
from .config import GameConfig
from .moves import NUM_DISTINCT_ACTIONS, NUM_MOVES
from .scoring import MAX_UTILITY, MIN_UTILITY
from .state import NUM_TABLEAUS, SolitaireState

OBSERVATION_SIZE = (
    NUM_TABLEAUS * TABLEAU_SLOTS
    + 4 * FOUNDATION_SLOTS
    + WASTE_SLOTS
    + STOCK_SLOTS
)


class SolitaireGame:
    """
    Klondike 游戏描述

    所有状态共享同一个描述对象 (配置在游戏生命周期内不变)。
    """

    short_name = "klondike"
    long_name = "Klondike Solitaire"

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()

    @property
    def num_distinct_actions(self) -> int:
        return NUM_DISTINCT_ACTIONS

    @property
    def num_moves(self) -> int:
        return NUM_MOVES

    @property
    def max_game_length(self) -> int:
        return self.config.max_game_length

    @property
    def num_players(self) -> int:
        """决策玩家数 (另有一个机会玩家)"""
        return 1

    @property
    def min_utility(self) -> float:
        return MIN_UTILITY

    @property
    def max_utility(self) -> float:
        return MAX_UTILITY

    @property
    def observation_tensor_shape(self) -> Tuple[int, ...]:
        return (OBSERVATION_SIZE,)

    @property
    def information_state_tensor_shape(self) -> Tuple[int, ...]:
        return (self.config.information_state_length,)

    def new_initial_state(self, logger: Optional[logging.Logger] = None) -> SolitaireState:
        """
        创建发牌前的初始状态

        Args:
            logger: 注入的日志记录器，默认为 klondike.state

        Returns:
            新状态 (机会节点，唯一合法动作为 Setup)
        """
        return SolitaireState(config=self.config, logger=logger)

    def __repr__(self) -> str:
        return f"SolitaireGame({self.config!r})"
