"""Paint dispatch over entity kinds.

Every drawable is an :class:`Entity`; its ``kind`` selects the painter.
Painters that show live game data (HUD, settings bar, popovers sized to
the canvas) receive the game as context.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TYPE_CHECKING

from worm_arcade.entity import Entity, EntityKind
from worm_arcade.surface import Surface

if TYPE_CHECKING:
    from worm_arcade.game import WormGame
    from worm_arcade.worm import Worm

HELP_LINES: tuple[str, ...] = (
    "Help",
    " ",
    "Up/Down/Left/Right: Move Worm",
    "Space: Pause/Resume",
    "D: Enable/Disable Debug",
    "S: Mute/Unmute",
)

HUD_FONT_SIZE = 8
POPOVER_COLOR = "#cccccc"
POPOVER_ALPHA = 0.5
TEXT_COLOR = "#000000"
HUD_COLOR = "#ffffff"


def game_over_lines(score: int) -> tuple[str, ...]:
    return ("Game Over", f"Score: {score}", " ", "Space: Restart")


def background(width: int, height: int, color: str = "#333333") -> Entity:
    return Entity(EntityKind.BACKGROUND, 0, 0, width, height, color)


def hud(x: int = 5, y: int = 5) -> Entity:
    return Entity(EntityKind.HUD, x, y, color=HUD_COLOR)


def popover(
    x: int, y: int, width: int, height: int, lines: tuple[str, ...],
) -> Entity:
    return Entity(
        EntityKind.POPOVER, x, y, width, height, POPOVER_COLOR,
        data={"lines": lines},
    )


def settings_bar(
    x: int,
    y: int,
    width: int,
    height: int,
    bg_color: str = "#cccccc",
    fg_color: str = "#333333",
) -> Entity:
    return Entity(
        EntityKind.SETTINGS, x, y, width, height, bg_color,
        data={"fg_color": fg_color},
    )


def _paint_cell(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    surface.fill_rect(
        entity.x * entity.scale,
        entity.y * entity.scale,
        entity.width * entity.scale,
        entity.height * entity.scale,
        entity.color,
    )


def _paint_background(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    surface.clear(entity.width, entity.height, entity.color)
    _paint_cell(surface, entity, game)


def _paint_nothing(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    pass


def _paint_hud(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    if game is None:
        return
    line_height = HUD_FONT_SIZE * 1.2
    apple_x, apple_y = game.apple.position
    worm_x, worm_y = game.worm.head_position()
    measured = game.fps_meter.current_fps
    lines = [
        f"Score: {game.score}",
        f"Apple: ({apple_x},{apple_y})",
        f"Worm: ({worm_x},{worm_y})",
        f"FPS: {measured:.1f}" if measured >= 0 else "FPS: -",
    ]
    y = entity.y + line_height
    for line in lines:
        surface.fill_text(line, entity.x, y, HUD_FONT_SIZE, "left", entity.color)
        y += line_height


def _paint_popover(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    lines = entity.data.get("lines", ())
    surface.fill_rect(
        entity.x, entity.y, entity.width, entity.height,
        entity.color, POPOVER_ALPHA,
    )
    if not lines:
        return
    if game is not None:
        canvas_width = game.config.canvas_width
        canvas_height = game.config.canvas_height
    else:
        canvas_width = entity.width
        canvas_height = entity.height
    px = canvas_width / 20
    x = canvas_width / 2
    line_height = px * 1.2
    y = canvas_height / 2 - line_height * len(lines) / 2
    surface.fill_text(lines[0], x, y, math.floor(px * 2), "center", TEXT_COLOR)
    y += line_height * 2
    for line in lines[1:]:
        surface.fill_text(line, x, y, math.floor(px), "center", TEXT_COLOR)
        y += line_height


def _paint_sound_icon(
    surface: Surface, x: float, y: float, muted: bool, color: str,
) -> None:
    # speaker body and cone
    surface.fill_rect(x, y + 4, 4, 4, color)
    surface.fill_rect(x + 4, y, 4, 12, color)
    if muted:
        surface.fill_text("x", x + 10, y + 10, 10, "left", color)
        return
    for i, height in enumerate((4, 8, 12)):
        surface.fill_rect(x + 10 + 3 * i, y + 6 - height / 2, 1, height, color)


def _paint_settings(surface: Surface, entity: Entity, game: WormGame | None) -> None:
    surface.fill_rect(entity.x, entity.y, entity.width, entity.height, entity.color)
    muted = game.mute if game is not None else True
    _paint_sound_icon(
        surface,
        entity.x + 5,
        entity.y + entity.height / 2 - 6,
        muted,
        entity.data.get("fg_color", TEXT_COLOR),
    )


_PAINTERS: dict[EntityKind, Callable[[Surface, Entity, WormGame | None], None]] = {
    EntityKind.WORM_PART: _paint_cell,
    EntityKind.APPLE: _paint_cell,
    EntityKind.CURSOR: _paint_nothing,
    EntityKind.BACKGROUND: _paint_background,
    EntityKind.HUD: _paint_hud,
    EntityKind.POPOVER: _paint_popover,
    EntityKind.SETTINGS: _paint_settings,
}


def paint_entity(
    surface: Surface, entity: Entity, game: WormGame | None = None,
) -> None:
    """Paint *entity* using the painter registered for its kind."""
    _PAINTERS[entity.kind](surface, entity, game)


def paint_worm(surface: Surface, worm: Worm) -> None:
    for part in worm.parts:
        paint_entity(surface, part)
