from __future__ import annotations

import numpy as np
import gymnasium as gym


class ResampleInvalidActionWrapper(gym.Wrapper):
    """If a chosen action is masked out, replace it with a uniformly chosen valid one.

    Useful when training with vanilla PPO (no action masking). The replacement
    is drawn from the wrapped env's `np_random`, so seeding the env reseeds it.
    """

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        if 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
            valid_idxs = np.flatnonzero(mask)
            if valid_idxs.size > 0:
                action = int(self.env.unwrapped.np_random.choice(valid_idxs))
        return self.env.step(action)

    # Delegate mask access if the wrapped env provides it
    def get_action_mask(self) -> np.ndarray:
        unwrapped = self.env.unwrapped
        if hasattr(unwrapped, "get_action_mask"):
            return unwrapped.get_action_mask()
        raise AttributeError("Underlying env does not provide get_action_mask")
