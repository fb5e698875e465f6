"""
异常定义

引擎内部的不变量被破坏时快速失败；外部传入的非法动作被拒绝而不修改状态。
"""


class SolitaireError(Exception):
    """所有引擎异常的基类"""
    pass


class CardNotFoundError(SolitaireError, LookupError):
    """在牌堆或状态中找不到指定的牌"""
    pass


class InvalidCardIndexError(SolitaireError, ValueError):
    """牌索引不在 [-5, 52) 范围内，或牌面尚未翻开"""
    pass


class InvalidActionIdError(SolitaireError, ValueError):
    """动作 ID 不属于任何保留区间或移动编码区间"""
    pass


class IllegalActionError(SolitaireError, ValueError):
    """动作 ID 有效，但在当前状态下不合法"""
    pass


class IllegalMoveError(SolitaireError):
    """移动的源牌或目标牌无法在当前牌局中定位"""
    pass
