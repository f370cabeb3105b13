from __future__ import annotations

import argparse
import os

import gymnasium as gym

# Ensure envs are registered
import falling_block_rl.env  # noqa: F401
from falling_block_rl.env.wrappers import ResampleInvalidActionWrapper


ENV_ID = "FallingBlock-10x20-v0"


def make_env(seed: int | None = None, gravity_every: int = 1) -> gym.Env:
    env = gym.make(ENV_ID, gravity_every=gravity_every)
    # Resample invalid actions for vanilla PPO; also forwards get_action_mask
    env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="ppo")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--gravity-every", type=int, default=1,
                   help="Apply one gravity tick every N environment steps (0 disables)")
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_falling_block.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    def make_env_idx(i: int):
        def thunk():
            seed = None if args.seed is None else args.seed + i
            e = make_env(seed, args.gravity_every)
            if args.algo == "maskable":
                from sb3_contrib.common.wrappers import ActionMasker

                e = ActionMasker(e, lambda env: env.get_action_mask())
            return e
        return thunk

    vec_env = SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)])
    vec_env = VecMonitor(vec_env)

    if args.algo == "maskable":
        # sb3-contrib MaskablePPO
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    model = Algo(
        policy="MlpPolicy",
        env=vec_env,
        verbose=1,
        tensorboard_log=args.logdir,
        seed=args.seed,
    )

    os.makedirs(os.path.dirname(args.save_path) or ".", exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)
    print(f"Saved model to {args.save_path}")


if __name__ == "__main__":  # pragma: no cover
    main()
