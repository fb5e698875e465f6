"""
牌局配置

定义引擎相关的静态参数
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """
    牌局配置

    Attributes:
        draw_count: 每次从 Stock 翻出的牌数
        draw_loop_limit: 连续无进展翻牌的上限，达到后牌局结束
        max_game_length: 最大决策步数 (供环境截断使用)
        information_state_length: 信息状态向量长度
    """
    draw_count: int = 3
    draw_loop_limit: int = 8
    max_game_length: int = 300
    information_state_length: int = 1000

    def __post_init__(self):
        if self.draw_count < 1:
            raise ValueError(f"draw_count must be positive, got {self.draw_count}")
        if self.draw_loop_limit < 1:
            raise ValueError(f"draw_loop_limit must be positive, got {self.draw_loop_limit}")
        if self.max_game_length < 1:
            raise ValueError(f"max_game_length must be positive, got {self.max_game_length}")
        if self.information_state_length < 1:
            raise ValueError(
                f"information_state_length must be positive, got {self.information_state_length}"
            )

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
