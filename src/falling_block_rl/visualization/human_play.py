from __future__ import annotations

import argparse
from typing import Callable, Dict, Optional

import pygame

from falling_block_rl.game import FallingBlockGame, GameConfig, GravityTimer
from .renderer import Renderer


GRAVITY_EVENT = pygame.USEREVENT + 1


class PygameGravityTimer(GravityTimer):
    """Gravity timer backed by `pygame.time.set_timer`.

    Each posted event carries the generation it was armed under, so events
    already sitting in the queue after a pause or reset are ignored.
    """

    def _arm(self) -> None:
        event = pygame.event.Event(GRAVITY_EVENT, generation=self.generation)
        pygame.time.set_timer(event, self.period_ms)

    def _disarm(self) -> None:
        pygame.time.set_timer(GRAVITY_EVENT, 0)


def key_bindings(game: FallingBlockGame) -> Dict[int, Callable[[], None]]:
    return {
        pygame.K_LEFT: lambda: game.request_move(-1, 0),
        pygame.K_RIGHT: lambda: game.request_move(1, 0),
        pygame.K_DOWN: lambda: game.request_move(0, 1),
        pygame.K_UP: game.request_rotate,
    }


def run(config: Optional[GameConfig] = None, cell_size: int = 28) -> None:
    config = config or GameConfig()
    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size((config.height, config.width)))
        pygame.display.set_caption("Falling Block - Human Play")

        game = FallingBlockGame(config, timer=PygameGravityTimer(config.gravity_ms))
        moves = key_bindings(game)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == GRAVITY_EVENT:
                    game.gravity_tick(getattr(event, "generation", None))
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        game.request_pause()
                    elif event.key == pygame.K_r:
                        game.request_reset()
                    elif event.key in moves and not (game.game_over or game.paused):
                        moves[event.key]()

            renderer.draw(screen, game.snapshot())
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity-ms", type=int, default=1000)
    p.add_argument("--cell-size", type=int, default=28)
    args = p.parse_args()
    run(GameConfig(random_seed=args.seed, gravity_ms=args.gravity_ms), cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
