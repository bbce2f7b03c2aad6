"""
Input Handler - Translates pygame events to gameplay commands.
This is a THIN ADAPTER - no game logic here.
"""
from typing import Optional

import pygame

from missile_command.gameplay.game import Game
from missile_command.ui.audio import AudioManager, VOLUME_STEP


class InputHandler:
    """
    Handles pointer and keyboard input and translates to game commands.

    - Left click fires at the pointer
    - Any key or click restarts once the game is over
    - P toggles pause, Escape quits
    - M toggles mute, - and = change the volume
    """

    def __init__(self, game: Game, audio: Optional[AudioManager] = None):
        self.game = game
        self.audio = audio

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns True if the game should quit.
        """
        if event.type == pygame.QUIT:
            return True

        if event.type == pygame.KEYDOWN:
            return self.handle_key(event.key)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.handle_click(event.pos)

        return False

    def handle_key(self, key: int) -> bool:
        """
        Handle a single key press.
        Returns True if the game should quit.
        """
        # Quit
        if key == pygame.K_ESCAPE:
            return True

        # Audio keys never count as "any key" for a restart
        if self.handle_audio_key(key):
            return False

        # Any key starts a new game from the game-over screen
        if self.game.is_game_over:
            self.game.restart()
            return False

        if key == pygame.K_p:
            if self.game.is_paused:
                self.game.resume()
            else:
                self.game.pause()

        return False

    def handle_audio_key(self, key: int) -> bool:
        """Returns True if the key was an audio control."""
        if key == pygame.K_m:
            if self.audio is not None:
                self.audio.toggle_mute()
            return True
        if key == pygame.K_MINUS:
            if self.audio is not None:
                self.audio.change_volume(-VOLUME_STEP)
            return True
        if key in (pygame.K_EQUALS, pygame.K_PLUS):
            if self.audio is not None:
                self.audio.change_volume(VOLUME_STEP)
            return True
        return False

    def handle_click(self, pos):
        """Fire at the clicked point, or restart from the game-over screen."""
        if self.game.is_game_over:
            self.game.restart()
            return
        if self.game.is_paused:
            return
        self.game.fire(pos)
