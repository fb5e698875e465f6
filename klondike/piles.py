"""
牌堆定义

三种牌堆共享同一套接口:
- sources(): 可以被移走的牌
- targets(): 可以接收移动的牌 (或空牌堆的占位牌)
- split(card): 移走 card 及压在它上面的所有牌
- extend(cards): 把一串牌放到牌堆顶部

引擎根据 pile.kind 分派，而不是依赖继承层次。
"""
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Iterator, List, Optional, Sequence
import logging

from .cards import Card, Location, Rank, Suit
from .errors import CardNotFoundError, IllegalMoveError

logger = logging.getLogger(__name__)


class Pile(ABC):
    """牌堆接口"""

    kind: Location

    @abstractmethod
    def sources(self) -> List[Card]:
        """可以被移走的牌"""

    @abstractmethod
    def targets(self) -> List[Card]:
        """可以接收移动的牌"""

    @abstractmethod
    def split(self, card: Card) -> List[Card]:
        """
        移走 card 及其上方的牌

        Raises:
            CardNotFoundError: card 不在可拆分的位置
        """

    @abstractmethod
    def extend(self, cards: Sequence[Card]) -> None:
        """把一串牌按顺序放到牌堆顶部"""

    @abstractmethod
    def __iter__(self) -> Iterator[Card]:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @property
    def is_empty(self) -> bool:
        return len(self) == 0


class Tableau(Pile):
    """
    Tableau 牌堆 (共 7 个)

    cards[0] 为最底下的牌，cards[-1] 为顶部的牌。
    只有顶部连续的明牌可以整体移动。
    """

    kind = Location.TABLEAU

    def __init__(self, num_cards: int = 0):
        """
        Args:
            num_cards: 初始暗牌数量
        """
        self.cards: List[Card] = [Card.unknown(Location.TABLEAU) for _ in range(num_cards)]

    @property
    def top(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    @property
    def has_hidden_top(self) -> bool:
        """顶部是否为暗牌 (需要机会节点翻开)"""
        return bool(self.cards) and self.cards[-1].hidden

    @property
    def num_hidden(self) -> int:
        return sum(1 for card in self.cards if card.hidden)

    def sources(self) -> List[Card]:
        # 任何明牌都可以带着上方的牌一起移动
        return [card for card in self.cards if not card.hidden]

    def targets(self) -> List[Card]:
        if not self.cards:
            return [Card.tableau_base()]
        if self.cards[-1].hidden:
            return []
        return [self.cards[-1]]

    def position(self, card: Card) -> int:
        """
        card 在牌堆中的位置

        Raises:
            CardNotFoundError: card 不在此牌堆中
        """
        if not card.is_known or card.is_marker:
            raise CardNotFoundError(f"Cannot locate {card} in a tableau")
        try:
            return self.cards.index(card)
        except ValueError:
            raise CardNotFoundError(f"{card} is not in this tableau") from None

    def split(self, card: Card) -> List[Card]:
        idx = self.position(card)
        split_cards = self.cards[idx:]
        del self.cards[idx:]
        return split_cards

    def extend(self, cards: Sequence[Card]) -> None:
        self.cards.extend(card.with_location(Location.TABLEAU) for card in cards)

    def reveal_top(self, card: Card) -> Card:
        """
        翻开顶部的暗牌

        Args:
            card: 翻开后的牌面

        Returns:
            翻开后的牌

        Raises:
            CardNotFoundError: 顶部没有暗牌
        """
        if not self.has_hidden_top:
            raise CardNotFoundError("This tableau has no hidden top card")
        self.cards[-1] = self.cards[-1].revealed_as(card)
        return self.cards[-1]

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Tableau({self.cards!r})"


class Foundation(Pile):
    """
    Foundation 牌堆 (每种花色一个)

    从 A 到 K 同花色递增，只能在顶部操作。
    """

    kind = Location.FOUNDATION

    def __init__(self, suit: Suit):
        self.suit = suit
        self.cards: List[Card] = []

    @property
    def top(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    @property
    def is_complete(self) -> bool:
        return len(self.cards) == len(Rank)

    def sources(self) -> List[Card]:
        return [self.cards[-1]] if self.cards else []

    def targets(self) -> List[Card]:
        if not self.cards:
            return [Card.foundation_base(self.suit)]
        return [self.cards[-1]]

    def split(self, card: Card) -> List[Card]:
        if not self.cards or self.cards[-1] != card:
            raise CardNotFoundError(f"{card} is not the top card of the {self.suit.name} foundation")
        return [self.cards.pop()]

    def extend(self, cards: Sequence[Card]) -> None:
        self.cards.extend(card.with_location(Location.FOUNDATION) for card in cards)

    def fill(self) -> None:
        """按 A 到 K 的顺序补全整个 Foundation"""
        self.cards = [Card(rank, self.suit, location=Location.FOUNDATION) for rank in Rank]

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Foundation({self.suit.name}, {self.cards!r})"


class StockWaste(Pile):
    """
    Stock 与 Waste

    Attributes:
        stock: 未发的牌，stock[0] 为下一张要翻的牌
        waste: 翻出的牌，waste[0] 为露在外面的牌
        initial_order: Waste 中的牌第一次翻开的顺序，用于重建 Stock
        times_rebuilt: 重建次数
    """

    kind = Location.WASTE

    def __init__(self, num_cards: int = 0):
        """
        Args:
            num_cards: Stock 中初始暗牌数量
        """
        self.stock: Deque[Card] = deque(Card.unknown(Location.STOCK) for _ in range(num_cards))
        self.waste: Deque[Card] = deque()
        self.initial_order: List[Card] = []
        self.times_rebuilt = 0

    @property
    def has_hidden_waste(self) -> bool:
        return any(card.hidden for card in self.waste)

    def sources(self) -> List[Card]:
        if self.waste and not self.waste[0].hidden:
            return [self.waste[0]]
        return []

    def targets(self) -> List[Card]:
        # Waste 不接受任何移动
        return []

    def split(self, card: Card) -> List[Card]:
        if not self.waste or self.waste[0] != card or self.waste[0].hidden:
            raise CardNotFoundError(f"{card} is not the exposed waste card")
        return [self.waste.popleft()]

    def extend(self, cards: Sequence[Card]) -> None:
        raise IllegalMoveError("The waste accepts no moves")

    def draw(self, num_cards: int) -> List[Card]:
        """
        从 Stock 翻最多 num_cards 张牌到 Waste

        翻出的牌整体放到 Waste 前端，保持翻牌顺序 (第一张翻出的牌露在外面)。

        Returns:
            翻出的牌
        """
        num_cards = min(num_cards, len(self.stock))
        drawn = [self.stock.popleft().with_location(Location.WASTE) for _ in range(num_cards)]
        self.waste.extendleft(reversed(drawn))
        return drawn

    def rebuild(self) -> bool:
        """
        用 Waste 重建 Stock

        按 initial_order 的顺序 (而不是 Waste 的顺序) 放回仍在 Waste 中的牌。

        Returns:
            是否执行了重建；Stock 非空时只记录警告并返回 False
        """
        if self.stock:
            logger.warning("Cannot rebuild a non-empty stock (%d cards left)", len(self.stock))
            return False

        in_waste = set(card for card in self.waste if not card.hidden)
        for card in self.initial_order:
            if card in in_waste:
                self.stock.append(card.with_location(Location.STOCK))
        self.waste.clear()
        self.times_rebuilt += 1
        return True

    def reveal_next(self, card: Card) -> Card:
        """
        翻开 Waste 中第一张暗牌 (从前端开始)，并记录到 initial_order

        Raises:
            CardNotFoundError: Waste 中没有暗牌
        """
        for i, existing in enumerate(self.waste):
            if existing.hidden:
                revealed = existing.revealed_as(card)
                self.waste[i] = revealed
                self.initial_order.append(revealed)
                return revealed
        raise CardNotFoundError("The waste has no hidden card")

    def __iter__(self) -> Iterator[Card]:
        yield from self.waste
        yield from self.stock

    def __len__(self) -> int:
        return len(self.stock) + len(self.waste)

    def __repr__(self) -> str:
        return f"StockWaste(stock={list(self.stock)!r}, waste={list(self.waste)!r})"
