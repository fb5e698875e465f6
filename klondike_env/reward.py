"""
奖励函数

支持多种奖励设计:
- 得分增量 (delta): 每步的得分变化
- 终局奖励 (sparse): 只在终局给出最终得分
- 归一化增量 (normalized): 得分变化除以最高得分
"""
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from klondike.scoring import MAX_UTILITY
from klondike.state import SolitaireState


class RewardType(Enum):
    """奖励类型"""
    DELTA = "delta"            # 得分增量
    SPARSE = "sparse"          # 仅终局奖励
    NORMALIZED = "normalized"  # 归一化得分增量


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.DELTA
    illegal_action_penalty: float = -1.0   # 非法动作惩罚
    solved_bonus: float = 0.0              # 全部完成时的额外奖励

    @classmethod
    def from_dict(cls, d: dict) -> 'RewardConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if isinstance(filtered.get("reward_type"), str):
            filtered["reward_type"] = RewardType(filtered["reward_type"])
        return cls(**filtered)


class RewardCalculator:
    """
    奖励计算器

    环境的一步可能包含一个玩家动作和若干个机会动作，
    因此奖励按整步前后的累计得分计算，而不是只取最后一个动作的 rewards()。
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(self, state: SolitaireState, prev_returns: float = 0.0) -> float:
        """
        计算奖励

        Args:
            state: 执行动作后的状态
            prev_returns: 执行动作前的累计得分

        Returns:
            奖励值
        """
        if self.config.reward_type == RewardType.SPARSE:
            reward = self._sparse_reward(state)
        elif self.config.reward_type == RewardType.NORMALIZED:
            reward = (state.returns() - prev_returns) / MAX_UTILITY
        else:
            reward = state.returns() - prev_returns

        if state.is_terminal() and state.is_won:
            reward += self.config.solved_bonus
        return reward

    def _sparse_reward(self, state: SolitaireState) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            终局为最终得分 (归一化到 [0, 1])，其他为 0
        """
        if not state.is_terminal():
            return 0.0
        return state.returns() / MAX_UTILITY


def create_reward_calculator(
    reward_type: str = "delta",
    **kwargs
) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("delta", "sparse", "normalized")
        **kwargs: 其他配置参数

    Returns:
        RewardCalculator 实例
    """
    config = RewardConfig(
        reward_type=RewardType(reward_type),
        **kwargs
    )
    return RewardCalculator(config)
