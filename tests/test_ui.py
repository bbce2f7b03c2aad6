"""
Smoke tests for the pygame adapters.

These run headless through SDL's dummy drivers (see conftest.py).
"""
import pytest

pygame = pytest.importorskip("pygame")

from missile_command.gameplay.geometry import Point
from missile_command.gameplay.constants import GROUND_Y
from missile_command.ui.input_handler import InputHandler
from missile_command.ui.renderer import Renderer, SCREEN_WIDTH, SCREEN_HEIGHT


def kill_everything(game):
    for s in game.structures.values():
        game.add_incoming(Point(s.aim_point.x, GROUND_Y - 5), s.aim_point, speed=10.0)
    game.simulate(1)


def click(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=pos, button=button)


def key(code):
    return pygame.event.Event(pygame.KEYDOWN, key=code)


class TestInputHandler:
    """Tests for translating pygame events into commands."""

    def test_left_click_fires(self, game):
        handler = InputHandler(game)
        assert handler.handle_event(click((400, 300))) is False
        game.simulate(1)
        assert len(game.snapshot.outgoing_projectiles) == 1

    def test_right_click_ignored(self, game):
        handler = InputHandler(game)
        handler.handle_event(click((400, 300), button=3))
        game.simulate(1)
        assert game.snapshot.outgoing_projectiles == ()

    def test_quit_and_escape(self, game):
        handler = InputHandler(game)
        assert handler.handle_event(pygame.event.Event(pygame.QUIT))
        assert handler.handle_event(key(pygame.K_ESCAPE))

    def test_p_toggles_pause(self, game):
        handler = InputHandler(game)
        handler.handle_event(key(pygame.K_p))
        assert game.is_paused
        handler.handle_event(key(pygame.K_p))
        assert not game.is_paused

    def test_click_while_paused_does_not_fire(self, game):
        handler = InputHandler(game)
        handler.handle_event(key(pygame.K_p))
        handler.handle_event(click((400, 300)))
        handler.handle_event(key(pygame.K_p))
        game.simulate(1)
        assert game.snapshot.outgoing_projectiles == ()

    def test_any_key_restarts_after_game_over(self, game):
        handler = InputHandler(game)
        kill_everything(game)
        assert game.is_game_over

        handler.handle_event(key(pygame.K_SPACE))
        game.simulate(1)
        assert not game.is_game_over

    def test_click_restarts_after_game_over(self, game):
        handler = InputHandler(game)
        kill_everything(game)

        handler.handle_event(click((400, 300)))
        game.simulate(1)
        assert not game.is_game_over
        assert game.snapshot.outgoing_projectiles == ()


class TestRenderer:
    """Smoke tests for drawing snapshots."""

    @pytest.fixture
    def renderer(self, game):
        pygame.init()
        surface = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
        renderer = Renderer(game, surface)
        renderer.init_fonts()
        yield renderer
        pygame.quit()

    def test_renders_battle(self, game, renderer):
        game.fire(Point(400, 300))
        game.add_incoming(Point(100, 0), Point(300, GROUND_Y))
        game.simulate(40)
        renderer.render()

    def test_renders_paused_and_game_over(self, game, renderer):
        game.pause()
        renderer.render()
        game.resume()

        kill_everything(game)
        renderer.render()
        assert game.is_game_over
