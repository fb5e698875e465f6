"""
观察空间编码

将游戏状态转换为定长数值向量:
- 观测: 7 个 Tableau (各 19 位) + 4 个 Foundation (各 13 位) + Waste (24 位) + Stock (24 位)，共 233 位
- 信息状态: 动作历史，左对齐，不足部分用 INVALID_ACTION 填充
- 合法动作掩码: 206 位
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import numpy as np

from klondike.cards import (
    FOUNDATION_SLOTS,
    NO_CARD,
    STOCK_SLOTS,
    TABLEAU_SLOTS,
    WASTE_SLOTS,
    cards_to_indices,
)
from klondike.moves import INVALID_ACTION, NUM_DISTINCT_ACTIONS
from klondike.state import NUM_TABLEAUS, SolitaireState

NUM_FOUNDATIONS = 4


@dataclass
class Observation:
    """
    结构化观测

    每个位置为牌索引 [0, 52)、HIDDEN_CARD (暗牌) 或 NO_CARD (空位)

    Attributes:
        tableaus: Tableau，从底到顶 (7, 19)
        foundations: Foundation，按 s, h, c, d (4, 13)
        waste: Waste，露在外面的牌在前 (24,)
        stock: Stock，下一张要翻的牌在前 (24,)
        legal_actions: 合法动作 ID
        phase: 游戏阶段
    """
    tableaus: np.ndarray
    foundations: np.ndarray
    waste: np.ndarray
    stock: np.ndarray
    legal_actions: List[int]
    phase: str

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "tableaus": self.tableaus,
            "foundations": self.foundations,
            "waste": self.waste,
            "stock": self.stock,
        }

    def to_flat_array(self) -> np.ndarray:
        """
        展平为单一向量

        特征维度:
        - tableaus: 7 * 19 = 133
        - foundations: 4 * 13 = 52
        - waste: 24
        - stock: 24
        """
        return np.concatenate([
            self.tableaus.flatten(),
            self.foundations.flatten(),
            self.waste,
            self.stock,
        ])


class ObservationBuilder:
    """
    观测构建器

    负责将 SolitaireState 转换为 Observation
    """

    def build(self, state: SolitaireState) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态

        Returns:
            Observation 对象 (发牌前所有牌堆都编码为空)
        """
        return Observation(
            tableaus=self._encode_tableaus(state),
            foundations=self._encode_foundations(state),
            waste=cards_to_indices(list(state.stock_waste.waste), WASTE_SLOTS),
            stock=cards_to_indices(list(state.stock_waste.stock), STOCK_SLOTS),
            legal_actions=state.legal_actions(),
            phase=state.phase.value,
        )

    def _encode_tableaus(self, state: SolitaireState) -> np.ndarray:
        result = np.full((NUM_TABLEAUS, TABLEAU_SLOTS), NO_CARD, dtype=np.float32)
        for i, tableau in enumerate(state.tableaus):
            result[i] = cards_to_indices(tableau.cards, TABLEAU_SLOTS)
        return result

    def _encode_foundations(self, state: SolitaireState) -> np.ndarray:
        result = np.full((NUM_FOUNDATIONS, FOUNDATION_SLOTS), NO_CARD, dtype=np.float32)
        for i, foundation in enumerate(state.foundations):
            result[i] = cards_to_indices(foundation.cards, FOUNDATION_SLOTS)
        return result


def observation_tensor(state: SolitaireState) -> np.ndarray:
    """
    观测向量

    Returns:
        (233,) float32 数组
    """
    return ObservationBuilder().build(state).to_flat_array()


def information_state_tensor(state: SolitaireState, length: Optional[int] = None) -> np.ndarray:
    """
    信息状态向量: 完整动作历史

    Args:
        state: 游戏状态
        length: 向量长度，默认取 state.config.information_state_length

    Returns:
        (length,) float32 数组，超出长度的历史被截断 (保留最早的部分)
    """
    if length is None:
        length = state.config.information_state_length
    result = np.full(length, INVALID_ACTION, dtype=np.float32)
    history = state.history[:length]
    result[:len(history)] = history
    return result


def legal_action_mask(state: SolitaireState) -> np.ndarray:
    """
    构建合法动作掩码

    Returns:
        (206,) float32 数组，合法动作位置为 1
    """
    mask = np.zeros(NUM_DISTINCT_ACTIONS, dtype=np.float32)
    legal_actions = state.legal_actions()
    if legal_actions:
        mask[legal_actions] = 1
    return mask
