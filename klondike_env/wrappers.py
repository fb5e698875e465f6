"""
环境包装器

- FlattenObservationWrapper: 字典观测 -> 233 维向量
- LegalActionMaskWrapper: info["action_mask"] 布尔掩码
- RewardScaleWrapper: 奖励乘以常数
- RecordEpisodeStatistics: 回合结束时写入 info["episode"]
"""
from typing import Dict, Tuple
import numpy as np

import gymnasium as gym
from gymnasium import ObservationWrapper, RewardWrapper, Wrapper

from klondike.cards import NO_CARD

from .observation import legal_action_mask

# 与 Observation.to_flat_array 相同的拼接顺序
FLAT_KEYS = ("tableaus", "foundations", "waste", "stock")


class FlattenObservationWrapper(ObservationWrapper):
    """
    把字典观测按 tableaus, foundations, waste, stock 的顺序拼成一个向量

    结果与 observation_tensor(state) 逐位相同
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        spaces = env.observation_space.spaces
        size = sum(int(np.prod(spaces[key].shape)) for key in FLAT_KEYS)
        self.observation_space = gym.spaces.Box(low=0, high=NO_CARD, shape=(size,), dtype=np.float32)

    def observation(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        return np.concatenate([np.ravel(obs[key]) for key in FLAT_KEYS]).astype(np.float32)


class LegalActionMaskWrapper(Wrapper):
    """在 info 中附加布尔类型的合法动作掩码，终局时全为 False"""

    def reset(self, **kwargs) -> Tuple[Dict, Dict]:
        obs, info = self.env.reset(**kwargs)
        return obs, self._with_mask(info)

    def step(self, action) -> Tuple[Dict, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)
        return obs, reward, terminated, truncated, self._with_mask(info)

    def _with_mask(self, info: Dict) -> Dict:
        info["action_mask"] = legal_action_mask(self.env.unwrapped.state).astype(bool)
        return info


class RewardScaleWrapper(RewardWrapper):
    """按常数缩放奖励 (得分量级在 0 到 3220 之间)"""

    def __init__(self, env: gym.Env, scale: float = 1.0):
        super().__init__(env)
        self.scale = scale

    def reward(self, reward: float) -> float:
        return reward * self.scale


class RecordEpisodeStatistics(Wrapper):
    """
    记录回合统计信息

    回合结束时 info["episode"] 包含:
        r: 累计奖励
        l: 步数 (含被拒绝的动作)
        rejected: 被拒绝的动作数
        returns: 最终得分
        solved: 是否完成全部 Foundation
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, float]:
        return {"r": 0.0, "l": 0, "rejected": 0}

    def reset(self, **kwargs) -> Tuple[Dict, Dict]:
        self._stats = self._empty_stats()
        return self.env.reset(**kwargs)

    def step(self, action) -> Tuple[Dict, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)

        self._stats["r"] += reward
        self._stats["l"] += 1
        self._stats["rejected"] += int("error" in info)

        if terminated or truncated:
            info["episode"] = dict(
                self._stats,
                returns=info.get("returns", 0.0),
                solved=info.get("solved", False),
            )

        return obs, reward, terminated, truncated, info


def wrap_env(
    env: gym.Env,
    flatten_obs: bool = False,
    action_mask: bool = True,
    record_stats: bool = True,
    reward_scale: float = 1.0,
) -> gym.Env:
    """
    应用常用包装器组合

    统计在缩放之前记录，所以 info["episode"]["r"] 是原始得分变化

    Args:
        env: KlondikeEnv
        flatten_obs: 是否展平观测
        action_mask: 是否添加动作掩码
        record_stats: 是否记录统计
        reward_scale: 奖励缩放系数

    Returns:
        包装后的环境
    """
    if record_stats:
        env = RecordEpisodeStatistics(env)
    if reward_scale != 1.0:
        env = RewardScaleWrapper(env, scale=reward_scale)
    if action_mask:
        env = LegalActionMaskWrapper(env)
    if flatten_obs:
        env = FlattenObservationWrapper(env)
    return env
