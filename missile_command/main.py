#!/usr/bin/env python3
"""
Missile Command - Main Entry Point

Incoming projectiles fall toward a row of structures. Fire counter-
projectiles that burst into blasts and take the incoming ones out of
the sky. Clear a wave to move on to a faster one.

Usage:
    python -m missile_command.main

Controls:
    Left click: Fire from the nearest armed structure
    P: Pause / resume
    M: Mute / unmute
    - and =: Volume down / up
    Any key or click after game over: Restart
    Escape: Quit
"""
import logging
import random

import pygame

from missile_command.config import Settings, get_settings
from missile_command.gameplay.game import Game
from missile_command.persistence import JsonBestScoreStore
from missile_command.ui.audio import AudioManager
from missile_command.ui.renderer import Renderer, SCREEN_WIDTH, SCREEN_HEIGHT
from missile_command.ui.input_handler import InputHandler

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_game(settings: Settings) -> Game:
    """Build a Game wired to the configured best-score file."""
    store = JsonBestScoreStore(settings.best_score_path, key=settings.best_score_key)
    rng = random.Random(settings.rng_seed)

    def on_game_over(score: int) -> None:
        logger.info(f"Final score: {score}")

    return Game(best_score_store=store, rng=rng, on_game_over=on_game_over)


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("Missile Command - Starting...")

    game = create_game(settings)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption(settings.window_title)
    clock = pygame.time.Clock()

    renderer = Renderer(game, screen)
    renderer.init_fonts()
    audio = AudioManager(
        audio_enabled=settings.audio_enabled,
        volume=settings.volume,
        muted=settings.muted,
    )
    audio.start_ambient()
    input_handler = InputHandler(game, audio)

    should_quit = False
    try:
        while not should_quit:
            for event in pygame.event.get():
                if input_handler.handle_event(event):
                    should_quit = True

            game.tick(pygame.time.get_ticks())
            audio.handle_events(game.events)
            renderer.render()
            pygame.display.flip()

            # Motion is per frame, so the frame cap also fixes game speed
            clock.tick(settings.target_fps)
    finally:
        audio.stop_ambient()
        pygame.quit()
        logger.info("Missile Command stopped.")


if __name__ == "__main__":
    main()
