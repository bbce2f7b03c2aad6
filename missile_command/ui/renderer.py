"""
Renderer - Reads a gameplay Snapshot and draws it with pygame.
This is a THIN ADAPTER - no game logic here.
"""
import math

import pygame

from missile_command.gameplay.game import Game, Snapshot
from missile_command.gameplay.entities import Projectile
from missile_command.gameplay.constants import (
    GAME_WIDTH, GAME_HEIGHT, GROUND_HEIGHT, GROUND_Y,
    STRUCTURE_WIDTH, STRUCTURE_HEIGHT,
)


# Visual constants
SCREEN_WIDTH = GAME_WIDTH
SCREEN_HEIGHT = GAME_HEIGHT

# Colors
COLOR_BACKGROUND = (2, 6, 23)
COLOR_GROUND = (10, 128, 10)
COLOR_GROUND_EDGE = (34, 197, 94)
COLOR_STRUCTURE = (22, 78, 99)
COLOR_STRUCTURE_EDGE = (34, 211, 238)
COLOR_INCOMING_TRAIL = (255, 0, 255)
COLOR_INCOMING_HEAD = (255, 255, 0)
COLOR_OUTGOING_TRAIL = (0, 255, 255)
COLOR_OUTGOING_HEAD = (255, 255, 255)
COLOR_BLAST_CORE = (255, 255, 255)
COLOR_BLAST_MID = (255, 200, 0)
COLOR_BLAST_EDGE = (255, 120, 0)

COLOR_HUD_LABEL_SCORE = (74, 222, 128)
COLOR_HUD_LABEL_LEVEL = (248, 113, 113)
COLOR_HUD_LABEL_BEST = (103, 232, 249)
COLOR_HUD_TEXT = (255, 255, 255)
COLOR_OVERLAY = (0, 0, 0, 180)


class Renderer:
    """
    Renders game state onto a pygame surface.

    This class reads from Game but never modifies it.
    """

    def __init__(self, game: Game, surface: pygame.Surface):
        self.game = game
        self.surface = surface

        # Fonts are created in init_fonts()
        self.hud_font = None
        self.small_font = None
        self.title_font = None

    def init_fonts(self):
        """Initialize pygame fonts. pygame.font must be initialized first."""
        self.small_font = pygame.font.Font(None, 22)
        self.hud_font = pygame.font.Font(None, 30)
        self.title_font = pygame.font.Font(None, 72)

    def render(self):
        """Render the latest snapshot."""
        snapshot = self.game.snapshot

        self.surface.fill(COLOR_BACKGROUND)
        self.render_ground()
        self.render_projectiles(snapshot.projectiles, COLOR_INCOMING_TRAIL, COLOR_INCOMING_HEAD)
        self.render_projectiles(snapshot.outgoing_projectiles, COLOR_OUTGOING_TRAIL, COLOR_OUTGOING_HEAD)
        self.render_blasts(snapshot)
        self.render_structures(snapshot)
        self.render_hud(snapshot)

        if snapshot.is_game_over:
            self.render_game_over(snapshot)
        elif self.game.is_paused:
            self.render_banner("PAUSED")

    def render_ground(self):
        pygame.draw.rect(
            self.surface, COLOR_GROUND,
            pygame.Rect(0, GROUND_Y, SCREEN_WIDTH, GROUND_HEIGHT)
        )
        pygame.draw.line(self.surface, COLOR_GROUND_EDGE, (0, GROUND_Y), (SCREEN_WIDTH, GROUND_Y), 2)

    def render_projectiles(self, projectiles, trail_color, head_color):
        """Draw each projectile as a trail from its start to its head."""
        for projectile in projectiles:
            self._render_projectile(projectile, trail_color, head_color)

    def _render_projectile(self, projectile: Projectile, trail_color, head_color):
        start = (round(projectile.start.x), round(projectile.start.y))
        head = (round(projectile.current.x), round(projectile.current.y))
        pygame.draw.line(self.surface, trail_color, start, head, 2)
        pygame.draw.circle(self.surface, head_color, head, 3)

    def render_blasts(self, snapshot: Snapshot):
        """Draw blasts as layered circles, fading while they shrink."""
        for blast in snapshot.blasts:
            radius = max(1, round(blast.radius))
            center = (round(blast.center.x), round(blast.center.y))

            if blast.is_expanding:
                fade = 1.0
            else:
                fade = max(0.0, min(1.0, blast.radius / blast.max_radius))

            pygame.draw.circle(self.surface, _scale(COLOR_BLAST_EDGE, fade), center, radius)
            pygame.draw.circle(self.surface, _scale(COLOR_BLAST_MID, fade), center, max(1, math.ceil(radius * 0.6)))
            pygame.draw.circle(self.surface, _scale(COLOR_BLAST_CORE, fade), center, max(1, math.ceil(radius * 0.3)))

    def render_structures(self, snapshot: Snapshot):
        """Draw surviving structures with their ammo counts."""
        for structure in snapshot.structures:
            if structure.is_destroyed:
                continue

            rect = pygame.Rect(
                round(structure.position.x), round(structure.position.y - STRUCTURE_HEIGHT),
                STRUCTURE_WIDTH, STRUCTURE_HEIGHT
            )
            pygame.draw.rect(self.surface, COLOR_STRUCTURE, rect, border_top_left_radius=8, border_top_right_radius=8)
            pygame.draw.line(self.surface, COLOR_STRUCTURE_EDGE, rect.topleft, rect.topright, 2)

            if self.small_font is not None:
                label = self.small_font.render(str(structure.ammo_count), True, COLOR_HUD_TEXT)
                self.surface.blit(label, label.get_rect(midbottom=(rect.centerx, rect.top - 4)))

    def render_hud(self, snapshot: Snapshot):
        """Score, level and best score along the top edge."""
        if self.hud_font is None:
            return

        entries = [
            ("SCORE", snapshot.score, COLOR_HUD_LABEL_SCORE, 16),
            ("LEVEL", snapshot.level, COLOR_HUD_LABEL_LEVEL, SCREEN_WIDTH // 2 - 60),
            ("BEST", snapshot.best_score, COLOR_HUD_LABEL_BEST, SCREEN_WIDTH - 180),
        ]
        for label, value, color, x in entries:
            text = self.hud_font.render(f"{label}: ", True, color)
            self.surface.blit(text, (x, 10))
            number = self.hud_font.render(str(value), True, COLOR_HUD_TEXT)
            self.surface.blit(number, (x + text.get_width(), 10))

    def render_game_over(self, snapshot: Snapshot):
        """Dim the field and show the final score."""
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill(COLOR_OVERLAY)
        self.surface.blit(overlay, (0, 0))

        if self.title_font is None or self.hud_font is None:
            return

        lines = [
            (self.title_font, "GAME OVER", COLOR_HUD_TEXT),
            (self.hud_font, f"Final Score: {snapshot.score}", COLOR_HUD_LABEL_BEST),
            (self.hud_font, f"Best Score: {snapshot.best_score}", COLOR_HUD_LABEL_BEST),
            (self.hud_font, "PRESS ANY KEY", COLOR_HUD_TEXT),
        ]
        y = SCREEN_HEIGHT // 2 - 90
        for font, text, color in lines:
            rendered = font.render(text, True, color)
            self.surface.blit(rendered, rendered.get_rect(midtop=(SCREEN_WIDTH // 2, y)))
            y += rendered.get_height() + 14

    def render_banner(self, text: str):
        if self.title_font is None:
            return
        rendered = self.title_font.render(text, True, COLOR_HUD_TEXT)
        self.surface.blit(rendered, rendered.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)))


def _scale(color, factor: float):
    """Darken an RGB color towards black."""
    return tuple(int(c * factor) for c in color)
