"""
Environment Layer - Gymnasium 兼容环境

Modules:
    klondike_env: 主环境类
    observation: 观测空间构建
    reward: 奖励函数
    wrappers: 环境包装器
"""
from .klondike_env import (
    KlondikeEnv,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    observation_tensor,
    information_state_tensor,
    legal_action_mask,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

from .wrappers import (
    FlattenObservationWrapper,
    LegalActionMaskWrapper,
    RewardScaleWrapper,
    RecordEpisodeStatistics,
    wrap_env,
)

__all__ = [
    # env
    "KlondikeEnv",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "observation_tensor",
    "information_state_tensor",
    "legal_action_mask",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
    # wrappers
    "FlattenObservationWrapper",
    "LegalActionMaskWrapper",
    "RewardScaleWrapper",
    "RecordEpisodeStatistics",
    "wrap_env",
]
