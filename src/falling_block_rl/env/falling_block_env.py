from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_block_rl.game import COLORS, Action, FallingBlockGame, GameConfig
from falling_block_rl.game.pieces import hex_to_rgb


_EMPTY_RGB = (30, 30, 36)
_PALETTE = np.array([_EMPTY_RGB] + [hex_to_rgb(c) for c in COLORS], dtype=np.uint8)


def _compute_action_mask(game: FallingBlockGame) -> np.ndarray:
    mask = np.ones((len(Action),), dtype=np.bool_)
    mask[Action.LEFT] = game.can_move(-1, 0)
    mask[Action.RIGHT] = game.can_move(1, 0)
    mask[Action.ROTATE] = game.can_rotate()
    return mask


class FallingBlockEnv(gym.Env):
    """Single-agent falling-block environment.

    Actions (5 total):
      0: Move Left
      1: Move Right
      2: Move Down (locks the piece when blocked)
      3: Rotate CW
      4: No-op

    After the action, gravity pulls the piece down once every
    `gravity_every` steps (0 disables gravity, leaving DOWN as the only way
    to land a piece).
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        gravity_every: int = 1,
        reward_weights: Optional[Dict[str, float]] = None,
        step_reward: float = 0.0,
        invalid_action_penalty: float = -0.1,
        terminal_penalty: float = -1.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = FallingBlockGame(config)
        self.render_mode = render_mode

        self.gravity_every = int(gravity_every)
        self.reward_weights: Dict[str, float] = {
            # Positive components
            "lines": 1.0,            # reward per line cleared
            # Negative components (penalize increases)
            "holes": 0.1,            # penalize holes created
            "height": 0.02,          # penalize max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})
        self.step_reward = float(step_reward)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.config.height, self.game.config.width
        n_colors = len(COLORS)
        # Settled blocks are positive color codes, the falling piece negative
        self.observation_space = spaces.Box(low=-n_colors, high=n_colors, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[np.ndarray] = None
        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_placed": self.game.pieces_placed,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        action = int(action)
        reward_components: Dict[str, float] = {}
        lines = 0
        holes_before = self.game.grid.count_holes()
        height_before = self.game.grid.get_max_height()

        if 0 <= action < len(Action) and bool(_compute_action_mask(self.game)[action]):
            _, lines, _, _ = self.game.step(Action(action))
            reward_components["step"] = self.step_reward
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        self._steps += 1
        if self.gravity_every > 0 and self._steps % self.gravity_every == 0 and not self.game.game_over:
            before = self.game.lines_cleared_total
            self.game.gravity_tick()
            lines += self.game.lines_cleared_total - before

        reward_components["lines"] = self.reward_weights["lines"] * float(lines)
        reward_components["holes"] = -self.reward_weights["holes"] * float(
            max(0, self.game.grid.count_holes() - holes_before))
        reward_components["height"] = -self.reward_weights["height"] * float(
            max(0, self.game.grid.get_max_height() - height_before))

        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["lines_cleared"] = lines
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs if self._last_obs is not None else self._get_obs()
            cell = 12
            img = _PALETTE[np.abs(grid.astype(np.int16))]
            return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)
        return None

    def close(self) -> None:
        pass
