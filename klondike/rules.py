"""
规则引擎 - 牌的定位、候选移动生成、可逆性判断

所有方法都是静态方法，只读取状态，不修改状态
"""
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional

from .cards import Card, CardKind, Location, Rank
from .errors import CardNotFoundError, IllegalMoveError
from .moves import Move
from .piles import Pile

if TYPE_CHECKING:
    from .state import SolitaireState


class Placement(NamedTuple):
    """一张牌在牌局中的位置"""
    card: Card
    pile: Pile
    location: Location
    position: int


CardIndex = Dict[Card, Placement]


class RuleEngine:
    """
    Klondike 规则引擎

    候选移动的生成每次调用只扫描一遍所有牌堆，建立 牌 -> 位置 的索引，
    之后对每个候选移动的查询都是 O(1)。
    """

    @staticmethod
    def index_cards(state: 'SolitaireState') -> CardIndex:
        """
        建立所有已知牌的位置索引

        Returns:
            牌 -> Placement 的映射 (不含未翻开的牌)
        """
        index: CardIndex = {}

        for tableau in state.tableaus:
            for pos, card in enumerate(tableau.cards):
                if card.is_known:
                    index[card] = Placement(card, tableau, Location.TABLEAU, pos)

        for foundation in state.foundations:
            for pos, card in enumerate(foundation.cards):
                index[card] = Placement(card, foundation, Location.FOUNDATION, pos)

        stock_waste = state.stock_waste
        for pos, card in enumerate(stock_waste.waste):
            if card.is_known:
                index[card] = Placement(card, stock_waste, Location.WASTE, pos)
        for pos, card in enumerate(stock_waste.stock):
            if card.is_known:
                index[card] = Placement(card, stock_waste, Location.STOCK, pos)

        return index

    @staticmethod
    def find_placement(state: 'SolitaireState', card: Card) -> Optional[Placement]:
        """查找普通牌的位置，找不到返回 None"""
        if card.is_marker or not card.is_known:
            return None
        return RuleEngine.index_cards(state).get(card)

    @staticmethod
    def find_pile(state: 'SolitaireState', card: Card) -> Optional[Pile]:
        """
        查找牌所在的牌堆

        - Tableau 占位牌: 第一个空 Tableau
        - Foundation 占位牌: 对应花色的空 Foundation
        - 普通牌: 包含它的牌堆

        Returns:
            牌堆，找不到返回 None
        """
        if card.kind == CardKind.TABLEAU_BASE:
            for tableau in state.tableaus:
                if tableau.is_empty:
                    return tableau
            return None

        if card.kind == CardKind.FOUNDATION_BASE:
            for foundation in state.foundations:
                if foundation.suit == card.suit and foundation.is_empty:
                    return foundation
            return None

        placement = RuleEngine.find_placement(state, card)
        return placement.pile if placement is not None else None

    @staticmethod
    def find_location(state: 'SolitaireState', card: Card) -> Location:
        """查找牌所在的位置，找不到返回 Location.MISSING"""
        if card.kind == CardKind.TABLEAU_BASE:
            return Location.TABLEAU
        if card.kind == CardKind.FOUNDATION_BASE:
            return Location.FOUNDATION
        placement = RuleEngine.find_placement(state, card)
        return placement.location if placement is not None else Location.MISSING

    @staticmethod
    def sources(state: 'SolitaireState', location: Optional[Location] = None) -> List[Card]:
        """
        所有可以被移走的牌

        Args:
            location: 只取该位置的牌堆，None 表示全部
        """
        sources: List[Card] = []
        if location in (None, Location.TABLEAU):
            for tableau in state.tableaus:
                sources.extend(tableau.sources())
        if location in (None, Location.FOUNDATION):
            for foundation in state.foundations:
                sources.extend(foundation.sources())
        if location in (None, Location.WASTE):
            sources.extend(state.stock_waste.sources())
        return sources

    @staticmethod
    def targets(state: 'SolitaireState', location: Optional[Location] = None) -> List[Card]:
        """
        所有可以接收移动的牌 (含空牌堆的占位牌)

        Args:
            location: 只取该位置的牌堆，None 表示全部
        """
        targets: List[Card] = []
        if location in (None, Location.TABLEAU):
            for tableau in state.tableaus:
                targets.extend(tableau.targets())
        if location in (None, Location.FOUNDATION):
            for foundation in state.foundations:
                targets.extend(foundation.targets())
        return targets

    @staticmethod
    def is_top_card(placement: Placement) -> bool:
        """是否在牌堆顶部 (Waste 为露在外面的那张)"""
        if placement.location == Location.WASTE:
            return placement.position == 0
        return placement.position == len(placement.pile) - 1

    @staticmethod
    def is_bottom_card(placement: Placement) -> bool:
        """是否为 Tableau 最底下的牌"""
        return placement.location == Location.TABLEAU and placement.position == 0

    @staticmethod
    def is_over_hidden(placement: Placement) -> bool:
        """是否直接压在一张暗牌上"""
        if placement.location != Location.TABLEAU or placement.position == 0:
            return False
        return placement.pile.cards[placement.position - 1].hidden

    @staticmethod
    def candidate_moves(
        state: 'SolitaireState',
        index: Optional[CardIndex] = None,
    ) -> List[Move]:
        """
        生成所有候选移动

        对每个目标牌的每张合法子牌，查找子牌当前的位置，
        子牌必须是当前可移走的牌。额外过滤:
        1. 从 Tableau 移到 Foundation 时，源牌必须在 Tableau 顶部
        2. K 移到空 Tableau 时，K 不能已经是某个 Tableau 最底下的牌

        Args:
            state: 游戏状态
            index: 预先建立的位置索引

        Returns:
            去重后的候选移动，按目标牌顺序排列
        """
        if index is None:
            index = RuleEngine.index_cards(state)

        sources = set(RuleEngine.sources(state))
        moves: List[Move] = []
        seen = set()

        for target in RuleEngine.targets(state):
            for child in target.legal_children():
                if child not in sources:
                    continue
                placement = index[child]

                if target.location == Location.FOUNDATION and placement.location == Location.TABLEAU:
                    if not RuleEngine.is_top_card(placement):
                        continue
                elif target.kind == CardKind.TABLEAU_BASE and child.rank == Rank.KING:
                    if RuleEngine.is_bottom_card(placement):
                        continue

                move = Move(target, placement.card)
                # 多个空 Tableau 会产生相同的移动
                if move in seen:
                    continue
                seen.add(move)
                moves.append(move)

        return moves

    @staticmethod
    def is_reversible(
        state: 'SolitaireState',
        move: Move,
        index: Optional[CardIndex] = None,
    ) -> bool:
        """
        判断移动在下一步是否可以被撤销

        - 源牌在 Waste: 不可逆 (牌无法回到 Waste)
        - 源牌在 Foundation: 可逆
        - 源牌在 Tableau: 除非是最底下的牌或压在暗牌上，否则可逆

        Raises:
            CardNotFoundError: 找不到源牌
            IllegalMoveError: 源牌不在 Waste、Foundation 或 Tableau 中
        """
        if index is None:
            index = RuleEngine.index_cards(state)

        placement = index.get(move.source)
        if placement is None:
            raise CardNotFoundError(f"Source card {move.source} is not in play")

        if placement.location == Location.WASTE:
            return False
        if placement.location == Location.FOUNDATION:
            return True
        if placement.location == Location.TABLEAU:
            return not (RuleEngine.is_bottom_card(placement) or RuleEngine.is_over_hidden(placement))

        raise IllegalMoveError(
            f"Source card {move.source} is in the {placement.location.value}, it cannot be moved"
        )

    @staticmethod
    def legal_moves(state: 'SolitaireState') -> List[Move]:
        """
        当前决策节点的合法移动

        上一步移动可逆时，屏蔽所有可逆移动，防止来回移动形成循环
        """
        index = RuleEngine.index_cards(state)
        moves = RuleEngine.candidate_moves(state, index)
        if state.is_reversible:
            moves = [m for m in moves if not RuleEngine.is_reversible(state, m, index)]
        return moves

    @staticmethod
    def is_solvable(state: 'SolitaireState') -> bool:
        """
        Stock 与 Waste 都为空，且 Tableau 中没有暗牌时，
        剩下的牌局一定可以完成
        """
        stock_waste = state.stock_waste
        if stock_waste.stock or stock_waste.waste:
            return False
        return all(tableau.num_hidden == 0 for tableau in state.tableaus)
