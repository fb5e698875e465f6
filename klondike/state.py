"""
游戏状态 - 机会节点与决策节点交替的状态机

一局游戏的动作序列:
1. Setup (机会节点): 发 7 个 Tableau (1-7 张暗牌) 与 24 张暗牌的 Stock
2. Reveal (机会节点): 每当 Tableau 顶部或 Waste 中出现暗牌，由机会玩家决定牌面
3. Draw / Move (决策节点): 玩家从 Stock 翻牌或移动牌

状态是可变的，只有 apply_action 会修改它；clone() 返回完全独立的副本。
"""
from enum import Enum
from typing import List, Optional, Set, Tuple
import copy
import logging

from .cards import Card, CardKind, Location, Suit, NUM_CARDS, cards_to_str
from .config import GameConfig
from .errors import IllegalActionError, IllegalMoveError
from .moves import (
    ActionType,
    Move,
    DRAW_ACTION,
    SETUP_ACTION,
    action_to_string,
    get_action_type,
    get_move_codec,
    reveal_action,
    revealed_card,
)
from .piles import Foundation, Pile, StockWaste, Tableau
from .rules import RuleEngine
from .scoring import compute_returns


CHANCE_PLAYER_ID = -1
PLAYER_ID = 0
TERMINAL_PLAYER_ID = -4

NUM_TABLEAUS = 7
STOCK_SIZE = 24


class Phase(Enum):
    """游戏阶段"""
    DEAL = "deal"          # 发牌前
    REVEAL = "reveal"      # 等待翻开暗牌
    PLAYING = "playing"    # 玩家决策
    FINISHED = "finished"  # 游戏结束


class SolitaireState:
    """
    Klondike 游戏状态

    Attributes:
        config: 牌局配置
        logger: 日志记录器
        stock_waste: Stock 与 Waste
        tableaus: 7 个 Tableau (发牌前为空)
        foundations: 4 个 Foundation，按 s, h, c, d 排列 (发牌前为空)
        history: 已执行的动作 ID
        revealed: 已翻开的牌的索引
        is_setup: 是否已发牌
        is_started: 所有 Tableau 顶牌是否都已翻开 (开始计分)
        is_finished: 是否已结束 (自动完成或翻牌循环)
        is_reversible: 上一次移动是否可逆
        draw_counter: 连续无进展翻牌次数
        previous_score: 上一个动作之前的得分
    """

    def __init__(self, config: Optional[GameConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or GameConfig()
        self.logger = logger or logging.getLogger(__name__)

        self.stock_waste = StockWaste()
        self.tableaus: List[Tableau] = []
        self.foundations: List[Foundation] = []

        self.history: List[int] = []
        self.revealed: Set[int] = set()

        self.is_setup = False
        self.is_started = False
        self.is_finished = False
        self.is_reversible = False
        self.draw_counter = 0
        self.previous_score = 0.0

    # ==================== 节点类型 ====================

    @property
    def phase(self) -> Phase:
        if self.is_terminal():
            return Phase.FINISHED
        if not self.is_setup:
            return Phase.DEAL
        if self._has_pending_reveal():
            return Phase.REVEAL
        return Phase.PLAYING

    def _has_pending_reveal(self) -> bool:
        """Tableau 顶部或 Waste 中是否有待翻开的暗牌"""
        if any(tableau.has_hidden_top for tableau in self.tableaus):
            return True
        return self.stock_waste.has_hidden_waste

    def _awaits_chance(self) -> bool:
        """未发牌或有待翻开的暗牌 (不检查终局)"""
        return not self.is_setup or self._has_pending_reveal()

    def is_chance_node(self) -> bool:
        """终局不是机会节点，即使 Waste 中还有未翻开的牌"""
        return self._awaits_chance() and not self.is_terminal()

    def current_player(self) -> int:
        """
        当前行动方

        Returns:
            CHANCE_PLAYER_ID、PLAYER_ID 或 TERMINAL_PLAYER_ID
        """
        if self.is_terminal():
            return TERMINAL_PLAYER_ID
        if self.is_chance_node():
            return CHANCE_PLAYER_ID
        return PLAYER_ID

    def is_terminal(self) -> bool:
        """
        是否为终局

        满足任一条件:
        1. 已完成 (自动完成或翻牌循环达到上限)
        2. 连续无进展翻牌次数达到上限
        3. 最近的 draw_loop_limit 个动作全是 Draw
        4. 决策节点上没有任何合法动作
        """
        limit = self.config.draw_loop_limit
        if self.is_finished or self.draw_counter >= limit:
            return True

        if len(self.history) >= limit and all(a == DRAW_ACTION for a in self.history[-limit:]):
            return True

        if self._awaits_chance():
            return False
        return not self._player_actions()

    # ==================== 合法动作 ====================

    def _player_actions(self) -> List[int]:
        """决策节点的合法动作 (不检查终局)"""
        actions = [move.action_id for move in RuleEngine.legal_moves(self)]
        if len(self.stock_waste) > 0 and self.draw_counter < self.config.draw_loop_limit:
            actions.append(DRAW_ACTION)
        return sorted(actions)

    def chance_outcomes(self) -> List[Tuple[int, float]]:
        """
        机会节点的所有结果及其概率

        Returns:
            [(动作 ID, 概率), ...]；非机会节点返回空列表
        """
        if not self.is_chance_node():
            return []
        if not self.is_setup:
            return [(SETUP_ACTION, 1.0)]

        p = 1.0 / (NUM_CARDS - len(self.revealed))
        return [
            (reveal_action(Card.from_index(i)), p)
            for i in range(NUM_CARDS)
            if i not in self.revealed
        ]

    def legal_actions(self) -> List[int]:
        """
        当前合法动作 (升序)

        Returns:
            机会节点返回所有可能结果，决策节点返回 Move/Draw，终局返回空列表
        """
        if self.is_terminal():
            return []
        if self.is_chance_node():
            return [action for action, _ in self.chance_outcomes()]
        return self._player_actions()

    def candidate_moves(self) -> List[Move]:
        """未经可逆性过滤的候选移动"""
        return RuleEngine.candidate_moves(self)

    def is_solvable(self) -> bool:
        return self.is_setup and RuleEngine.is_solvable(self)

    # ==================== 执行动作 ====================

    def apply_action(self, action_id: int) -> None:
        """
        执行动作

        Args:
            action_id: 动作 ID

        Raises:
            InvalidActionIdError: ID 不在 [0, 206) 中
            IllegalActionError: ID 合法但当前不可执行 (状态不变)
        """
        action_type = get_action_type(action_id)
        if action_id not in self.legal_actions():
            raise IllegalActionError(
                f"Action {action_to_string(action_id)} is not legal in phase {self.phase.value}"
            )

        self.previous_score = self.returns()

        if action_type == ActionType.SETUP:
            self._apply_setup()
        elif action_type == ActionType.REVEAL:
            self._apply_reveal(revealed_card(action_id))
        elif action_type == ActionType.DRAW:
            self._apply_draw()
        else:
            self._apply_move(action_id)

        self.history.append(action_id)
        self.logger.debug("Applied %s (returns=%.1f)", action_to_string(action_id), self.returns())

        if self.is_solvable():
            self._auto_solve()

    def _apply_setup(self) -> None:
        self.tableaus = [Tableau(i) for i in range(1, NUM_TABLEAUS + 1)]
        self.foundations = [Foundation(suit) for suit in Suit]
        self.stock_waste = StockWaste(STOCK_SIZE)

        self.is_setup = True
        self.is_started = False
        self.is_finished = False
        self.is_reversible = False
        self.draw_counter = 0
        self.previous_score = 0.0

    def _apply_reveal(self, card: Card) -> None:
        """翻开第一个顶部为暗牌的 Tableau；没有则翻开 Waste 中的第一张暗牌"""
        for tableau in self.tableaus:
            if tableau.has_hidden_top:
                tableau.reveal_top(card)
                break
        else:
            self.stock_waste.reveal_next(card)

        self.revealed.add(card.index)

        if not self.is_started and not any(t.has_hidden_top for t in self.tableaus):
            self.is_started = True
            self.previous_score = 0.0

    def _apply_draw(self) -> None:
        if not self.stock_waste.stock:
            self.stock_waste.rebuild()
        self.stock_waste.draw(self.config.draw_count)

        # 翻牌后除 Draw 外没有其他动作，视为一次无进展的翻牌
        if not RuleEngine.legal_moves(self):
            self.draw_counter += 1

        if self.draw_counter >= self.config.draw_loop_limit:
            self.is_finished = True
            self.logger.info("Draw loop detected after %d draws, finishing the game", self.draw_counter)

    def _apply_move(self, action_id: int) -> None:
        move = get_move_codec().decode(action_id)

        # 可逆性必须在移动之前判断
        self.is_reversible = RuleEngine.is_reversible(self, move)
        self._move_cards(move)
        self.draw_counter = 0

    def _move_cards(self, move: Move) -> None:
        """
        把源牌及其上方的牌移到目标牌堆

        Raises:
            IllegalMoveError: 找不到源牌或目标牌堆
        """
        index = RuleEngine.index_cards(self)

        source = index.get(move.source)
        if source is None or source.location not in (Location.TABLEAU, Location.FOUNDATION, Location.WASTE):
            raise IllegalMoveError(f"Source {move.source} is not in a tableau, foundation or the waste")

        target_pile: Optional[Pile]
        if move.target.kind == CardKind.ORDINARY:
            target = index.get(move.target)
            valid = target is not None and target.location in (Location.TABLEAU, Location.FOUNDATION)
            target_pile = target.pile if valid else None
        else:
            target_pile = RuleEngine.find_pile(self, move.target)
        if target_pile is None:
            raise IllegalMoveError(f"Target {move.target} is not in a tableau or foundation")

        cards = source.pile.split(source.card)
        target_pile.extend(cards)

    def _auto_solve(self) -> None:
        """剩余牌局必然可以完成: 清空 Tableau，补全所有 Foundation"""
        for tableau in self.tableaus:
            tableau.cards.clear()
        for foundation in self.foundations:
            foundation.fill()
        self.is_finished = True
        self.logger.info("Position is solvable, auto-completing the foundations")

    # ==================== 得分 ====================

    def returns(self) -> float:
        """当前累计得分"""
        return compute_returns(self)

    def rewards(self) -> float:
        """上一个动作带来的得分变化，开始计分前为 0"""
        if not self.is_started:
            return 0.0
        return self.returns() - self.previous_score

    @property
    def is_won(self) -> bool:
        """所有 Foundation 都已完成"""
        return bool(self.foundations) and all(f.is_complete for f in self.foundations)

    # ==================== 工具方法 ====================

    def action_to_string(self, action_id: int) -> str:
        return action_to_string(action_id)

    def physical_cards(self) -> List[Card]:
        """牌局中所有的实体牌 (不含占位牌)"""
        cards: List[Card] = []
        for tableau in self.tableaus:
            cards.extend(tableau)
        for foundation in self.foundations:
            cards.extend(foundation)
        cards.extend(self.stock_waste)
        return cards

    def clone(self) -> 'SolitaireState':
        """深拷贝，只共享配置与日志记录器"""
        memo = {id(self.logger): self.logger, id(self.config): self.config}
        return copy.deepcopy(self, memo)

    def __str__(self) -> str:
        foundations = [str(f.top) if f.top is not None else str(Card.foundation_base(f.suit)) for f in self.foundations]
        lines = [
            f"CURRENT PLAYER : {self.current_player()}",
            f"DRAW COUNTER   : {self.draw_counter}",
            "",
            f"STOCK       : {cards_to_str(self.stock_waste.stock)}",
            f"WASTE       : {cards_to_str(self.stock_waste.waste)}",
            f"ORDER       : {cards_to_str(self.stock_waste.initial_order)}",
            f"FOUNDATIONS : {' '.join(foundations)}",
            "TABLEAUS    :",
        ]
        lines.extend(cards_to_str(t.cards) for t in self.tableaus if t.cards)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"SolitaireState(phase={self.phase.value}, history_len={len(self.history)})"
