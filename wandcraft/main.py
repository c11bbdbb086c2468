#!/usr/bin/env python3
"""
WANDCRAFT - Wand Casting Sandbox
=================================
A row of spinning turrets, each casting one of the built-in wands.

Controls:
    1-9     - Inspect turret N in the HUD
    SPACE   - Pause / resume
    D       - Toggle wand execution debug logs
    F       - Toggle FPS display
    R       - Restart the sandbox
    Q/ESC   - Quit
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from blessed import Terminal

from .casting import spawn_wand
from .components import (
    Position, Rotation, AngularVelocity, Renderable, TurretTag,
    WandHolder, ManaBar
)
from .content import WANDS
from .engine import (
    GameRenderer, HUD_ROWS, GRAY_DARK, GRAY_MED,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_RED, WHITE
)
from .settings import Settings, Flag
from .simulation import Simulation
from .systems import render_system


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 60
MIN_HEIGHT = 16

TURRET_SPIN = 0.025  # Radians per tick


# =============================================================================
# SANDBOX STATE
# =============================================================================

class Sandbox:
    """Owns the simulation and everything the terminal front-end needs."""

    def __init__(self, term: Terminal, wand_ids: List[str],
                 seed: Optional[int] = None, debug_casts: bool = False):
        self.term = term
        self.wand_ids = wand_ids
        self.seed = seed
        self.debug_casts = debug_casts

        self.renderer = GameRenderer(term, term.width, term.height - HUD_ROWS)
        self.running = True
        self.paused = False
        self.selected = 0

        self.sim: Optional[Simulation] = None
        self.turrets: List[int] = []
        self.restart()

    def restart(self):
        """Build a fresh simulation with one turret per wand."""
        config = Settings(
            arena_width=self.renderer.width,
            arena_height=self.renderer.game_height,
        )
        flags = [Flag.DEBUG_WAND_EXECUTION_LOGS] if self.debug_casts else []
        self.sim = Simulation(config=config, seed=self.seed, flags=flags)

        count = len(self.wand_ids)
        self.turrets = []
        for i, wand_id in enumerate(self.wand_ids):
            turret_id = self.sim.world.create_entity(
                Position(config.arena_width * (i + 1) / (count + 1),
                         config.arena_height / 2),
                Rotation(0.0),
                AngularVelocity(TURRET_SPIN if i % 2 == 0 else -TURRET_SPIN),
                Renderable(char='Ψ', color=WHITE, layer=10),
                TurretTag(),
            )
            spawn_wand(self.sim, wand_id, turret_id)
            self.turrets.append(turret_id)

        self.selected = min(self.selected, count - 1)
        logger.info('Sandbox started with wands %s (seed=%s)', self.wand_ids, self.seed)

    def update(self):
        if not self.paused:
            self.sim.step()

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            key_str = key.lower() if not key.is_sequence else ''

            if key_str == 'q' or key.name == 'KEY_ESCAPE':
                self.running = False
                return
            elif key_str and key_str in '123456789':
                index = int(key_str) - 1
                if index < len(self.turrets):
                    self.selected = index
            elif key_str == ' ':
                self.paused = not self.paused
            elif key_str == 'd':
                self.debug_casts = self.sim.toggle_flag(Flag.DEBUG_WAND_EXECUTION_LOGS)
                logger.info('Wand execution logs %s', 'on' if self.debug_casts else 'off')
            elif key_str == 'f':
                self.renderer.show_fps = not self.renderer.show_fps
            elif key_str == 'r':
                self.restart()

            key = self.term.inkey(timeout=0)

    def render(self):
        self.renderer.begin_frame()

        self.renderer.draw_box(0, 0, self.renderer.width, self.renderer.game_height, GRAY_DARK)
        render_system(self.sim.world, self.renderer)

        # Highlight the inspected turret
        turret_id = self.turrets[self.selected]
        pos = self.sim.world.get_component(turret_id, Position)
        if pos:
            self.renderer.put(int(round(pos.x)), int(round(pos.y)), 'Ψ', NEON_YELLOW)

        render_hud(self, self.renderer)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)


# =============================================================================
# UI RENDERING
# =============================================================================

def render_hud(sandbox: Sandbox, renderer: GameRenderer):
    """Render the HUD rows below the arena."""
    sim = sandbox.sim
    ui_y = renderer.game_height
    width = renderer.width

    renderer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.put_string(2, ui_y, ' WANDCRAFT ', NEON_MAGENTA)

    status = f' TICK:{sim.tick}  ENTITIES:{sim.world.entity_count()} '
    if sandbox.paused:
        status = ' PAUSED ' + status
    if renderer.show_fps:
        status = f' FPS:{renderer.current_fps:.0f} ' + status
    renderer.put_string(width - len(status) - 1, ui_y, status, NEON_YELLOW)

    turret_id = sandbox.turrets[sandbox.selected]
    wand_id = sandbox.wand_ids[sandbox.selected]
    wand = sim.wands[wand_id]

    renderer.put_string(
        1, ui_y + 1,
        f'[{sandbox.selected + 1}] {wand.name}',
        NEON_CYAN
    )

    holder = sim.world.get_component(turret_id, WandHolder)
    if holder is None:
        reason = sim.halted.get(turret_id, 'no wand')
        renderer.put_string(1, ui_y + 2, f'HALTED: {reason}'[:width - 2], NEON_RED)
        return

    bar = sim.world.get_component(turret_id, ManaBar)
    renderer.put_string(1, ui_y + 2, 'MANA ', GRAY_MED)
    renderer.draw_bar(6, ui_y + 2, 20, bar.fill if bar else 0)
    renderer.put_string(
        28, ui_y + 2,
        f'{holder.state.mana:5.1f}/{wand.max_mana}',
        WHITE
    )

    deck, hand, discarded = holder.state.pile_sizes()
    piles = f'DECK:{deck} HAND:{hand} DISCARD:{discarded}  RECHARGE:{holder.state.recharge_delay}'
    renderer.put_string(1, ui_y + 3, piles, GRAY_MED)

    # Deck contents, next card first
    x = len(piles) + 3
    for ref in holder.state.deck:
        symbol = sim.cards[ref.id].symbol
        if x + len(symbol) >= width:
            break
        renderer.put_string(x, ui_y + 3, symbol, NEON_CYAN)
        x += len(symbol) + 1

    logs = 'DEBUG LOGS ON' if Flag.DEBUG_WAND_EXECUTION_LOGS in sim.flags else ''
    renderer.put_string(width - len(logs) - 1, ui_y + 1, logs, NEON_RED)


# =============================================================================
# MAIN LOOP
# =============================================================================

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Wand casting sandbox')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for spread and lifetime rolls')
    parser.add_argument('--wands', default=','.join(WANDS),
                        help='Comma-separated wand ids, one turret each (max 9)')
    parser.add_argument('--debug-casts', action='store_true',
                        help='Log every draw, skip and recharge')
    parser.add_argument('--log-file', default='wandcraft.log',
                        help='Where logs go (the terminal belongs to the renderer)')
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point. Sets up terminal and runs the 60 FPS loop."""
    args = parse_args(argv)

    logging.basicConfig(
        filename=args.log_file,
        level=logging.DEBUG,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    wand_ids = [w.strip() for w in args.wands.split(',') if w.strip()][:9]
    unknown = [w for w in wand_ids if w not in WANDS]
    if unknown or not wand_ids:
        print(f'Unknown wand ids: {", ".join(unknown) or "(none given)"}. '
              f'Available: {", ".join(WANDS)}')
        sys.exit(2)

    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        sandbox = Sandbox(term, wand_ids, seed=args.seed, debug_casts=args.debug_casts)

        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        print(term.home + term.clear, end='', flush=True)

        while sandbox.running:
            now = time.perf_counter()
            delta = now - last_time
            last_time = now

            # Clamp delta to prevent spiral of death
            delta = min(delta, FRAME_TIME * 5)

            accumulator += delta
            fps_timer += delta

            sandbox.handle_input()

            ticks = 0
            while accumulator >= FRAME_TIME and ticks < 4:
                sandbox.update()
                accumulator -= FRAME_TIME
                ticks += 1
                fps_frame_count += 1

            sandbox.render()

            if fps_timer >= 0.5:
                sandbox.renderer.current_fps = fps_frame_count / fps_timer
                fps_frame_count = 0
                fps_timer = 0.0

            elapsed = time.perf_counter() - now
            sleep_time = FRAME_TIME - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)


if __name__ == '__main__':
    main()
