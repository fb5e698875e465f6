"""牌堆测试"""
from collections import deque
import logging

import pytest

from klondike.cards import Card, Location, Suit, str_to_cards
from klondike.errors import CardNotFoundError, IllegalMoveError
from klondike.piles import Foundation, StockWaste, Tableau


def make_tableau(layout: str) -> Tableau:
    tableau = Tableau()
    tableau.extend(str_to_cards(layout))
    return tableau


def make_stock(layout: str) -> StockWaste:
    stock_waste = StockWaste()
    stock_waste.stock = deque(c.with_location(Location.STOCK) for c in str_to_cards(layout))
    return stock_waste


class TestTableau:
    """Tableau 测试"""

    def test_dealt_cards_hidden(self):
        tableau = Tableau(3)
        assert len(tableau) == 3
        assert tableau.has_hidden_top
        assert tableau.num_hidden == 3
        assert tableau.sources() == []
        assert tableau.targets() == []

    def test_empty_targets_base(self):
        tableau = Tableau()
        assert tableau.is_empty
        assert tableau.top is None
        assert tableau.targets() == [Card.tableau_base()]

    def test_sources_and_targets(self):
        tableau = make_tableau("?? Ks Qh")
        assert tableau.sources() == [Card.from_str("Ks"), Card.from_str("Qh")]
        assert tableau.targets() == [Card.from_str("Qh")]

    def test_split(self):
        tableau = make_tableau("?? Ks Qh Js")
        split = tableau.split(Card.from_str("Qh"))
        assert [str(c) for c in split] == ["Qh", "Js"]
        assert [str(c) for c in tableau] == ["??", "Ks"]

    def test_split_absent(self):
        tableau = make_tableau("?? Ks")
        with pytest.raises(CardNotFoundError):
            tableau.split(Card.from_str("Qd"))
        assert len(tableau) == 2

    def test_extend_retags(self):
        tableau = make_tableau("Ks")
        tableau.extend([Card.from_str("Qh").with_location(Location.WASTE)])
        assert tableau.top == Card.from_str("Qh")
        assert tableau.top.location == Location.TABLEAU

    def test_reveal_top(self):
        tableau = Tableau(2)
        revealed = tableau.reveal_top(Card.from_str("7h"))
        assert str(revealed) == "7h"
        assert revealed.location == Location.TABLEAU
        assert not tableau.has_hidden_top
        assert tableau.num_hidden == 1

        with pytest.raises(CardNotFoundError):
            tableau.reveal_top(Card.from_str("8h"))


class TestFoundation:
    """Foundation 测试"""

    def test_empty(self):
        foundation = Foundation(Suit.HEARTS)
        assert foundation.sources() == []
        assert foundation.targets() == [Card.foundation_base(Suit.HEARTS)]

    def test_extend_and_split_top(self):
        foundation = Foundation(Suit.SPADES)
        foundation.extend(str_to_cards("As 2s"))
        assert foundation.targets() == [Card.from_str("2s")]
        assert foundation.top.location == Location.FOUNDATION

        assert foundation.split(Card.from_str("2s")) == [Card.from_str("2s")]
        assert len(foundation) == 1

    def test_split_not_top(self):
        foundation = Foundation(Suit.SPADES)
        foundation.extend(str_to_cards("As 2s"))
        with pytest.raises(CardNotFoundError):
            foundation.split(Card.from_str("As"))
        assert len(foundation) == 2

    def test_fill(self):
        foundation = Foundation(Suit.CLUBS)
        foundation.fill()
        assert foundation.is_complete
        assert str(foundation.cards[0]) == "Ac"
        assert str(foundation.top) == "Kc"


class TestStockWaste:
    """Stock/Waste 测试"""

    def test_initial(self):
        stock_waste = StockWaste(24)
        assert len(stock_waste) == 24
        assert all(c.hidden for c in stock_waste.stock)
        assert stock_waste.targets() == []

    def test_draw_hidden(self):
        stock_waste = StockWaste(24)
        drawn = stock_waste.draw(3)
        assert len(drawn) == 3
        assert len(stock_waste.stock) == 21
        assert all(c.location == Location.WASTE for c in stock_waste.waste)
        assert stock_waste.has_hidden_waste
        assert stock_waste.sources() == []

    def test_reveal_next(self):
        stock_waste = StockWaste(24)
        stock_waste.draw(3)
        stock_waste.reveal_next(Card.from_str("Kd"))
        stock_waste.reveal_next(Card.from_str("Qd"))

        assert [str(c) for c in stock_waste.waste] == ["Kd", "Qd", "??"]
        assert stock_waste.initial_order == [Card.from_str("Kd"), Card.from_str("Qd")]
        assert stock_waste.sources() == [Card.from_str("Kd")]

    def test_draw_order(self):
        stock_waste = make_stock("As 2s 3s 4s")
        stock_waste.draw(3)
        assert [str(c) for c in stock_waste.waste] == ["As", "2s", "3s"]

        # 不足 3 张时全部翻出
        stock_waste.draw(3)
        assert [str(c) for c in stock_waste.waste] == ["4s", "As", "2s", "3s"]
        assert not stock_waste.stock

    def test_split_front_only(self):
        stock_waste = make_stock("As 2s 3s")
        stock_waste.draw(3)
        with pytest.raises(CardNotFoundError):
            stock_waste.split(Card.from_str("2s"))
        assert stock_waste.split(Card.from_str("As")) == [Card.from_str("As")]
        assert stock_waste.sources() == [Card.from_str("2s")]

    def test_extend_rejected(self):
        with pytest.raises(IllegalMoveError):
            StockWaste().extend([Card.from_str("As")])

    def test_rebuild_uses_initial_order(self):
        stock_waste = make_stock("As 2s 3s 4s")
        stock_waste.initial_order = str_to_cards("As 2s 3s 4s")
        stock_waste.draw(3)
        stock_waste.draw(3)
        stock_waste.split(Card.from_str("4s"))

        assert stock_waste.rebuild()
        assert [str(c) for c in stock_waste.stock] == ["As", "2s", "3s"]
        assert all(c.location == Location.STOCK for c in stock_waste.stock)
        assert not stock_waste.waste
        assert stock_waste.times_rebuilt == 1

    def test_rebuild_ignores_waste_order(self):
        stock_waste = make_stock("As 2s 3s 4s 5s 6s")
        stock_waste.initial_order = str_to_cards("As 2s 3s 4s 5s 6s")
        stock_waste.draw(3)
        stock_waste.draw(3)
        assert [str(c) for c in stock_waste.waste] == ["4s", "5s", "6s", "As", "2s", "3s"]

        assert stock_waste.rebuild()
        assert [str(c) for c in stock_waste.stock] == ["As", "2s", "3s", "4s", "5s", "6s"]

    def test_rebuild_non_empty_stock(self, caplog):
        stock_waste = StockWaste(5)
        with caplog.at_level(logging.WARNING, logger="klondike.piles"):
            assert not stock_waste.rebuild()
        assert "non-empty stock" in caplog.text
        assert len(stock_waste.stock) == 5
        assert stock_waste.times_rebuilt == 0
