"""
牌的定义与编码

Klondike 使用一副 52 张的标准扑克牌：
- A, 2-10, J, Q, K 共 13 种点数
- 黑桃 s、红心 h、梅花 c、方块 d 共 4 种花色

除普通牌外还有两种占位牌 (marker)，代表空牌堆可以接收的位置：
- 空 Tableau 的占位牌 (无点数、无花色)
- 空 Foundation 的占位牌 (无点数、有花色)

牌的整数索引:
    普通牌: 13 * suit + (rank - 1)  ->  As=0, ..., Ks=12, Ah=13, ..., Kd=51
    Foundation 占位牌: s=-1, h=-2, c=-3, d=-4
    Tableau 占位牌: -5
"""
from enum import Enum, IntEnum
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from .errors import InvalidCardIndexError


class Rank(IntEnum):
    """点数"""
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


class Suit(IntEnum):
    """花色 (顺序决定牌的索引)"""
    SPADES = 0
    HEARTS = 1
    CLUBS = 2
    DIAMONDS = 3


class CardKind(Enum):
    """牌的种类"""
    ORDINARY = "ordinary"                # 普通牌 (可能尚未翻开)
    TABLEAU_BASE = "tableau_base"        # 空 Tableau 占位牌
    FOUNDATION_BASE = "foundation_base"  # 空 Foundation 占位牌


class Location(Enum):
    """牌所在的位置"""
    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION = "foundation"
    TABLEAU = "tableau"
    MISSING = "missing"


# 点数到显示字符的映射
RANK_TO_STR: Dict[Rank, str] = {
    Rank.ACE: 'A', Rank.TWO: '2', Rank.THREE: '3', Rank.FOUR: '4',
    Rank.FIVE: '5', Rank.SIX: '6', Rank.SEVEN: '7', Rank.EIGHT: '8',
    Rank.NINE: '9', Rank.TEN: '10', Rank.JACK: 'J', Rank.QUEEN: 'Q',
    Rank.KING: 'K',
}

STR_TO_RANK: Dict[str, Rank] = {v: k for k, v in RANK_TO_STR.items()}

SUIT_TO_STR: Dict[Suit, str] = {
    Suit.SPADES: 's', Suit.HEARTS: 'h', Suit.CLUBS: 'c', Suit.DIAMONDS: 'd',
}

STR_TO_SUIT: Dict[str, Suit] = {v: k for k, v in SUIT_TO_STR.items()}

RED_SUITS: Tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS)
BLACK_SUITS: Tuple[Suit, ...] = (Suit.SPADES, Suit.CLUBS)

# 颜色相反的花色 (Tableau 上必须红黑交替)
OPPOSITE_SUITS: Dict[Suit, Tuple[Suit, ...]] = {
    Suit.SPADES: RED_SUITS,
    Suit.CLUBS: RED_SUITS,
    Suit.HEARTS: BLACK_SUITS,
    Suit.DIAMONDS: BLACK_SUITS,
}

# 每张牌进入 Foundation 的得分 (每种花色合计 580)
FOUNDATION_POINTS: Dict[Rank, int] = {
    Rank.ACE: 100, Rank.TWO: 90, Rank.THREE: 80, Rank.FOUR: 70,
    Rank.FIVE: 60, Rank.SIX: 50, Rank.SEVEN: 40, Rank.EIGHT: 30,
    Rank.NINE: 20, Rank.TEN: 10, Rank.JACK: 10, Rank.QUEEN: 10,
    Rank.KING: 10,
}

NUM_CARDS = 52

# 占位牌的保留索引
FOUNDATION_BASE_INDEX: Dict[Suit, int] = {
    Suit.SPADES: -1, Suit.HEARTS: -2, Suit.CLUBS: -3, Suit.DIAMONDS: -4,
}
INDEX_TO_FOUNDATION_SUIT: Dict[int, Suit] = {v: k for k, v in FOUNDATION_BASE_INDEX.items()}
TABLEAU_BASE_INDEX = -5

# 观测编码中的特殊值
HIDDEN_CARD = 98   # 背面朝上的牌
NO_CARD = 99       # 空位

# 观测编码中每种牌堆的长度
TABLEAU_SLOTS = 19      # 6 张暗牌 + K 到 A 共 13 张
FOUNDATION_SLOTS = 13
WASTE_SLOTS = 24
STOCK_SLOTS = 24


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    相等与哈希只取决于 (kind, rank, suit)；hidden 与 location 属于状态，
    不参与比较。翻牌或移动时用新对象替换牌堆中的旧对象。

    尚未翻开的普通牌没有点数和花色 (rank/suit 均为 None)。

    Attributes:
        rank: 点数，占位牌和未翻开的牌为 None
        suit: 花色，Tableau 占位牌和未翻开的牌为 None
        kind: 牌的种类
        hidden: 是否背面朝上
        location: 所在位置
    """
    rank: Optional[Rank] = None
    suit: Optional[Suit] = None
    kind: CardKind = CardKind.ORDINARY
    hidden: bool = field(default=False, compare=False)
    location: Location = field(default=Location.MISSING, compare=False)

    def __post_init__(self):
        if self.kind == CardKind.ORDINARY and (self.rank is None) != (self.suit is None):
            raise ValueError("An ordinary card needs both rank and suit, or neither")
        if self.kind == CardKind.FOUNDATION_BASE and (self.suit is None or self.rank is not None):
            raise ValueError("A foundation base has a suit and no rank")
        if self.kind == CardKind.TABLEAU_BASE and (self.suit is not None or self.rank is not None):
            raise ValueError("A tableau base has neither rank nor suit")

    @classmethod
    def unknown(cls, location: Location = Location.MISSING) -> 'Card':
        """创建一张尚未翻开的牌"""
        return cls(hidden=True, location=location)

    @classmethod
    def tableau_base(cls) -> 'Card':
        """创建空 Tableau 的占位牌"""
        return cls(kind=CardKind.TABLEAU_BASE, location=Location.TABLEAU)

    @classmethod
    def foundation_base(cls, suit: Suit) -> 'Card':
        """创建空 Foundation 的占位牌"""
        return cls(suit=suit, kind=CardKind.FOUNDATION_BASE, location=Location.FOUNDATION)

    @classmethod
    def from_index(cls, index: int) -> 'Card':
        """
        从整数索引创建牌

        Args:
            index: [0, 52) 为普通牌，-1 到 -4 为 Foundation 占位牌，-5 为 Tableau 占位牌

        Returns:
            未定位的牌 (占位牌带有对应位置)

        Raises:
            InvalidCardIndexError: 索引超出范围
        """
        if 0 <= index < NUM_CARDS:
            return cls(Rank(index % 13 + 1), Suit(index // 13))
        if index == TABLEAU_BASE_INDEX:
            return cls.tableau_base()
        if index in INDEX_TO_FOUNDATION_SUIT:
            return cls.foundation_base(INDEX_TO_FOUNDATION_SUIT[index])
        raise InvalidCardIndexError(f"Invalid card index: {index}")

    @classmethod
    def from_str(cls, s: str) -> 'Card':
        """
        从字符串创建牌

        Args:
            s: 如 "As", "10h", "Kd"；"__" 为 Tableau 占位牌，"_s" 为黑桃 Foundation 占位牌

        Returns:
            未定位的牌
        """
        if s == '__':
            return cls.tableau_base()
        if len(s) == 2 and s[0] == '_':
            return cls.foundation_base(STR_TO_SUIT[s[1]])
        return cls(STR_TO_RANK[s[:-1]], STR_TO_SUIT[s[-1]])

    @property
    def is_known(self) -> bool:
        """牌面是否已知"""
        return self.kind != CardKind.ORDINARY or self.rank is not None

    @property
    def is_marker(self) -> bool:
        return self.kind != CardKind.ORDINARY

    @property
    def index(self) -> int:
        """
        牌的整数索引

        Raises:
            InvalidCardIndexError: 牌尚未翻开
        """
        if self.kind == CardKind.TABLEAU_BASE:
            return TABLEAU_BASE_INDEX
        if self.kind == CardKind.FOUNDATION_BASE:
            return FOUNDATION_BASE_INDEX[self.suit]
        if self.rank is None:
            raise InvalidCardIndexError("A card that has not been revealed has no index")
        return 13 * int(self.suit) + int(self.rank) - 1

    def with_location(self, location: Location) -> 'Card':
        """返回位置改变后的同一张牌"""
        return replace(self, location=location)

    def revealed_as(self, card: 'Card') -> 'Card':
        """翻开这张牌，牌面取自 card，位置保持不变"""
        return Card(card.rank, card.suit, hidden=False, location=self.location)

    def legal_children(self) -> List['Card']:
        """
        可以放到这张牌上的所有牌

        - Tableau 占位牌: 四张 K
        - Tableau 普通牌 (非 A): 低一点、颜色相反的两张牌
        - Foundation 占位牌: 同花色的 A
        - Foundation 普通牌 (非 K): 高一点、同花色的牌
        - 背面朝上的牌没有合法子牌

        Returns:
            未定位的牌，调用方需要自行查找它们当前所在的牌堆
        """
        if self.hidden:
            return []

        if self.location == Location.TABLEAU:
            if self.kind == CardKind.TABLEAU_BASE:
                return [Card(Rank.KING, suit) for suit in Suit]
            if self.kind == CardKind.ORDINARY and self.rank != Rank.ACE:
                child_rank = Rank(self.rank - 1)
                return [Card(child_rank, suit) for suit in OPPOSITE_SUITS[self.suit]]

        elif self.location == Location.FOUNDATION:
            if self.kind == CardKind.FOUNDATION_BASE:
                return [Card(Rank.ACE, self.suit)]
            if self.kind == CardKind.ORDINARY and self.rank != Rank.KING:
                return [Card(Rank(self.rank + 1), self.suit)]

        return []

    def __str__(self) -> str:
        if self.kind == CardKind.TABLEAU_BASE:
            return '__'
        if self.kind == CardKind.FOUNDATION_BASE:
            return '_' + SUIT_TO_STR[self.suit]
        if self.hidden or self.rank is None:
            return '??'
        return RANK_TO_STR[self.rank] + SUIT_TO_STR[self.suit]


# 完整牌组 (按索引排序)
FULL_DECK: Tuple[Card, ...] = tuple(Card.from_index(i) for i in range(NUM_CARDS))


def cards_to_indices(cards: Sequence[Card], length: int) -> np.ndarray:
    """
    将牌堆编码为定长向量

    Args:
        cards: 牌堆中的牌 (按牌堆自身顺序)
        length: 向量长度，不足部分用 NO_CARD 填充

    Returns:
        (length,) float32 数组，每个位置为牌索引、HIDDEN_CARD 或 NO_CARD
    """
    result = np.full(length, NO_CARD, dtype=np.float32)
    for i, card in enumerate(cards):
        if i >= length:
            break
        result[i] = HIDDEN_CARD if card.hidden else card.index
    return result


def cards_to_str(cards: Sequence[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "?? ?? 7h 6s"
    """
    return ' '.join(str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """
    将空格分隔的字符串转换为牌列表，"??" 表示未翻开的牌
    """
    return [Card.unknown() if token == '??' else Card.from_str(token) for token in s.split()]
