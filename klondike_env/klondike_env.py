"""
Klondike Gymnasium 环境

遵循标准 Gymnasium API。机会节点 (发牌、翻牌) 由环境内部用 np_random 采样，
智能体只在决策节点上行动。
"""
from typing import Dict, Any, Tuple, Optional, List
import logging
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from klondike.cards import FOUNDATION_SLOTS, NO_CARD, STOCK_SLOTS, TABLEAU_SLOTS, WASTE_SLOTS
from klondike.config import GameConfig
from klondike.errors import IllegalActionError, InvalidActionIdError
from klondike.game import SolitaireGame
from klondike.moves import NUM_DISTINCT_ACTIONS, action_to_string
from klondike.state import NUM_TABLEAUS, SolitaireState

from .observation import NUM_FOUNDATIONS, ObservationBuilder, legal_action_mask
from .reward import RewardCalculator, RewardConfig, RewardType

logger = logging.getLogger(__name__)


class KlondikeEnv(gym.Env):
    """
    Klondike Gymnasium 环境

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "Klondike-v1",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_type: str = "delta",
        config: Optional[GameConfig] = None,
        reward_config: Optional[RewardConfig] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            reward_type: 奖励类型 ("delta", "sparse", "normalized")，传入 reward_config 时忽略
            config: 牌局配置
            reward_config: 奖励配置
            seed: 第一次 reset 使用的随机种子
        """
        super().__init__()

        self.render_mode = render_mode
        self._seed = seed

        self.game = SolitaireGame(config)

        # 观测构建器
        self._obs_builder = ObservationBuilder()

        # 奖励计算器
        self._reward_calculator = RewardCalculator(
            reward_config or RewardConfig(reward_type=RewardType(reward_type))
        )

        # 状态
        self._state: Optional[SolitaireState] = None
        self._step_count = 0

        # 定义空间
        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        self.action_space = spaces.Discrete(NUM_DISTINCT_ACTIONS)

        # 每个位置为牌索引、HIDDEN_CARD 或 NO_CARD
        self.observation_space = spaces.Dict({
            "tableaus": spaces.Box(0, NO_CARD, shape=(NUM_TABLEAUS, TABLEAU_SLOTS), dtype=np.float32),
            "foundations": spaces.Box(0, NO_CARD, shape=(NUM_FOUNDATIONS, FOUNDATION_SLOTS), dtype=np.float32),
            "waste": spaces.Box(0, NO_CARD, shape=(WASTE_SLOTS,), dtype=np.float32),
            "stock": spaces.Box(0, NO_CARD, shape=(STOCK_SLOTS,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境: 发牌并翻开 7 张 Tableau 顶牌

        Args:
            seed: 随机种子
            options: 额外选项

        Returns:
            (observation, info) 元组
        """
        # 构造时给定的种子只用于第一次 reset
        if seed is None:
            seed, self._seed = self._seed, None
        super().reset(seed=seed)

        self._state = self.game.new_initial_state()
        self._step_count = 0
        self._resolve_chance_nodes()

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: int,
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作 ID

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")

        action = int(action)

        # 终局之后的 step 不再计为非法动作
        if self._state.is_terminal():
            return self._build_observation(), 0.0, True, False, self._build_info()

        prev_returns = self._state.returns()

        try:
            self._state.apply_action(action)
        except (InvalidActionIdError, IllegalActionError) as e:
            # 非法动作：给予惩罚并保持状态
            logger.debug("Rejected action %s: %s", action_to_string(action), e)
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = str(e)
            return obs, self._reward_calculator.config.illegal_action_penalty, False, False, info

        self._step_count += 1
        self._resolve_chance_nodes()

        # 构建观测
        obs = self._build_observation()

        # 计算奖励
        reward = self._reward_calculator.compute(self._state, prev_returns)

        # 检查终止
        terminated = self._state.is_terminal()
        truncated = not terminated and self._step_count >= self.game.max_game_length

        # 构建 info
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _resolve_chance_nodes(self):
        """按机会节点的概率分布采样，直到决策节点或终局"""
        while self._state.is_chance_node():
            outcomes = self._state.chance_outcomes()
            actions = [a for a, _ in outcomes]
            probs = np.array([p for _, p in outcomes])
            idx = self.np_random.choice(len(actions), p=probs / probs.sum())
            self._state.apply_action(actions[idx])

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """构建观测"""
        return self._obs_builder.build(self._state).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        info = {
            "phase": self._state.phase.value,
            "legal_actions": self._state.legal_actions(),
            "legal_action_mask": legal_action_mask(self._state),
            "returns": self._state.returns(),
            "step_count": self._step_count,
            "draw_counter": self._state.draw_counter,
        }

        if self._state.is_terminal():
            info["solved"] = self._state.is_won

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        lines = []
        lines.append("=" * 50)
        lines.append(f"Phase: {self._state.phase.value}")
        lines.append(f"Step: {self._step_count}  Returns: {self._state.returns():.1f}")
        lines.append(str(self._state))
        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        """关闭环境"""
        pass

    @property
    def state(self) -> Optional[SolitaireState]:
        """获取当前状态 (用于调试)"""
        return self._state

    def get_legal_actions(self) -> List[int]:
        """获取当前合法动作"""
        if self._state is None:
            return []
        return self._state.legal_actions()

    def action_masks(self) -> np.ndarray:
        """合法动作掩码"""
        if self._state is None:
            return np.zeros(NUM_DISTINCT_ACTIONS, dtype=np.float32)
        return legal_action_mask(self._state)

    def sample_action(self) -> int:
        """随机采样一个合法动作"""
        legal_actions = self.get_legal_actions()
        if not legal_actions:
            raise RuntimeError("No legal action to sample")
        idx = self.np_random.integers(len(legal_actions))
        return legal_actions[idx]


def make_env(
    env_id: str = "Klondike-v1",
    **kwargs
) -> KlondikeEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        KlondikeEnv 实例
    """
    if env_id != KlondikeEnv.metadata["name"]:
        raise ValueError(f"Unknown environment id: {env_id}")
    return KlondikeEnv(**kwargs)
