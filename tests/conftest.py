"""
共享 pytest fixtures

提供从可读字符串直接构建牌局的工具，避免在测试中逐步发牌、翻牌
"""
from collections import deque
from typing import Optional, Sequence

import pytest

from klondike.cards import Card, Location, str_to_cards
from klondike.config import GameConfig
from klondike.moves import SETUP_ACTION, reveal_action
from klondike.piles import StockWaste, Tableau
from klondike.state import NUM_TABLEAUS, SolitaireState

# 默认的 7 张 Tableau 顶牌
DEFAULT_TOPS = ("As", "2s", "3s", "4s", "5s", "6s", "7s")


def build_state(
    tableaus: Sequence[str] = (),
    foundations: Sequence[str] = (),
    waste: str = "",
    stock: str = "",
    order: Optional[str] = None,
    reversible: bool = False,
    config: Optional[GameConfig] = None,
) -> SolitaireState:
    """
    从字符串构建一个已开始的牌局

    Args:
        tableaus: 每个 Tableau 从底到顶，如 "?? ?? 7h 6s"，不足 7 个时补空 Tableau
        foundations: 每个 Foundation (s, h, c, d)，如 "As 2s"
        waste: Waste，露在外面的牌在前
        stock: Stock，下一张要翻的牌在前
        order: Waste 的初始翻开顺序，默认为 Waste 与 Stock 中的已知牌
        reversible: 上一次移动是否可逆

    Examples:
        >>> state = build_state(tableaus=["?? 8s", "7h"], stock="??")
    """
    state = SolitaireState(config=config)
    state.apply_action(SETUP_ACTION)

    layouts = list(tableaus) + [""] * (NUM_TABLEAUS - len(tableaus))
    state.tableaus = []
    for layout in layouts:
        tableau = Tableau()
        tableau.extend(str_to_cards(layout))
        state.tableaus.append(tableau)

    for foundation, layout in zip(state.foundations, foundations):
        foundation.extend(str_to_cards(layout))

    stock_waste = StockWaste()
    stock_waste.waste = deque(c.with_location(Location.WASTE) for c in str_to_cards(waste))
    stock_waste.stock = deque(c.with_location(Location.STOCK) for c in str_to_cards(stock))
    if order is None:
        known = [c for c in list(stock_waste.waste) + list(stock_waste.stock) if c.is_known]
    else:
        known = str_to_cards(order)
    stock_waste.initial_order = known
    state.stock_waste = stock_waste

    state.revealed = {c.index for c in state.physical_cards() if c.is_known}
    state.is_started = True
    state.is_reversible = reversible
    state.previous_score = state.returns()
    return state


def deal(tops: Sequence[str] = DEFAULT_TOPS, config: Optional[GameConfig] = None) -> SolitaireState:
    """
    发牌并依次翻开 7 个 Tableau 的顶牌

    Args:
        tops: 第 1 到第 7 个 Tableau 的顶牌
    """
    state = SolitaireState(config=config)
    state.apply_action(SETUP_ACTION)
    for s in tops:
        state.apply_action(reveal_action(Card.from_str(s)))
    return state


@pytest.fixture
def make_state():
    """Expose build_state() as a fixture"""
    return build_state


@pytest.fixture
def dealt_state() -> SolitaireState:
    """顶牌为 As-7s 的已开始牌局"""
    return deal()


@pytest.fixture
def deal_with():
    """Expose deal() as a fixture"""
    return deal
