#!/usr/bin/env python3
"""
随机对局脚本

Usage:
    python scripts/play.py                      # 随机玩 1 局
    python scripts/play.py --games 100 --seed 0 # 随机玩 100 局并统计
    python scripts/play.py --render --delay 0.5 # 逐步显示牌局
"""
import argparse
import logging
import sys
from pathlib import Path
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import numpy as np

from klondike.config import GameConfig
from klondike.moves import action_to_string
from klondike.scoring import compute_breakdown
from klondike_env import KlondikeEnv

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Klondike random play")

    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Seed of the first game")
    parser.add_argument("--draw-count", type=int, default=3, help="Cards turned per draw")
    parser.add_argument("--max-steps", type=int, default=300, help="Decision steps before truncation")
    parser.add_argument(
        "--reward-type",
        type=str,
        default="delta",
        choices=["delta", "sparse", "normalized"],
        help="Reward type",
    )
    parser.add_argument("--render", action="store_true", help="Print the board after every step")
    parser.add_argument("--delay", type=float, default=0.0, help="Delay between moves")
    parser.add_argument("--verbose", action="store_true", help="Log every applied action")

    return parser.parse_args()


def play_game(env: KlondikeEnv, seed, args) -> dict:
    """随机玩一局，返回统计信息"""
    obs, info = env.reset(seed=seed)
    done = False
    total_reward = 0.0

    while not done:
        action = env.sample_action()
        if args.render:
            print(f"\n> {action_to_string(action)}")

        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += reward
        done = terminated or truncated

        if args.render:
            env.render()
        if args.delay > 0:
            time.sleep(args.delay)

    breakdown = compute_breakdown(env.state)
    return {
        "returns": info["returns"],
        "reward": total_reward,
        "steps": info["step_count"],
        "solved": info.get("solved", False),
        "truncated": not terminated,
        "foundation": breakdown.foundation,
    }


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    config = GameConfig(draw_count=args.draw_count, max_game_length=args.max_steps)
    env = KlondikeEnv(
        render_mode="human" if args.render else None,
        reward_type=args.reward_type,
        config=config,
    )

    logger.info("=" * 60)
    logger.info("Klondike random play: %d game(s)", args.games)
    logger.info("=" * 60)

    results = []
    for game_idx in range(args.games):
        seed = None if args.seed is None else args.seed + game_idx
        result = play_game(env, seed, args)
        results.append(result)
        logger.info(
            "Game %d/%d: returns=%.0f steps=%d solved=%s truncated=%s",
            game_idx + 1, args.games, result["returns"], result["steps"],
            result["solved"], result["truncated"],
        )

    returns = np.array([r["returns"] for r in results])
    logger.info("-" * 60)
    logger.info("Mean returns: %.1f (std %.1f, max %.0f)", returns.mean(), returns.std(), returns.max())
    logger.info("Mean foundation score: %.1f", np.mean([r["foundation"] for r in results]))
    logger.info("Solved: %d/%d", sum(r["solved"] for r in results), len(results))

    env.close()


if __name__ == "__main__":
    main()
