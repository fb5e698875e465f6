"""
得分计算

得分每次都从当前牌堆重新计算，只在牌局开始 (所有 Tableau 顶牌都已翻开) 后生效:
- Foundation: 每张牌按点数计分
- Tableau: (21 - 暗牌数) * 20，即将被自动翻开的顶部暗牌不计入
- Stock/Waste: (24 - 剩余牌数) * 20
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .cards import FOUNDATION_POINTS, NUM_CARDS, Rank

if TYPE_CHECKING:
    from .state import SolitaireState


TABLEAU_BASELINE = 21        # 发牌后 Tableau 中的暗牌数
STOCK_BASELINE = 24          # 发牌后 Stock 中的牌数
SCORE_MULTIPLIER = 20

MIN_UTILITY = 0.0
MAX_UTILITY = float(
    sum(FOUNDATION_POINTS[rank] for rank in Rank) * (NUM_CARDS // len(Rank))
    + TABLEAU_BASELINE * SCORE_MULTIPLIER
    + STOCK_BASELINE * SCORE_MULTIPLIER
)


@dataclass(frozen=True)
class ScoreBreakdown:
    """得分组成"""
    foundation: float = 0.0
    tableau: float = 0.0
    stock_waste: float = 0.0

    @property
    def total(self) -> float:
        return self.foundation + self.tableau + self.stock_waste


def compute_breakdown(state: 'SolitaireState') -> ScoreBreakdown:
    """
    计算各部分得分

    Args:
        state: 游戏状态

    Returns:
        ScoreBreakdown，牌局开始前全部为 0
    """
    if not state.is_started:
        return ScoreBreakdown()

    foundation_score = sum(
        FOUNDATION_POINTS[card.rank]
        for foundation in state.foundations
        for card in foundation.cards
    )

    num_hidden = 0
    for tableau in state.tableaus:
        num_hidden += tableau.num_hidden
        # 顶部暗牌下一步就会被翻开，不计入
        if tableau.has_hidden_top:
            num_hidden -= 1
    tableau_score = (TABLEAU_BASELINE - num_hidden) * SCORE_MULTIPLIER

    remaining = len(state.stock_waste)
    stock_waste_score = (STOCK_BASELINE - remaining) * SCORE_MULTIPLIER

    return ScoreBreakdown(
        foundation=float(foundation_score),
        tableau=float(tableau_score),
        stock_waste=float(stock_waste_score),
    )


def compute_returns(state: 'SolitaireState') -> float:
    """当前累计得分"""
    return compute_breakdown(state).total
