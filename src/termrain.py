#!/usr/bin/env python3
"""
termrain - column-based digital rain for ANSI terminals
"""
import enum
import os
import random
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

# Debug logging
DEFAULT_LOG_PATH = '/tmp/termrain.log'

def env_flag(name: str) -> bool:
    return os.environ.get(name, '0') in ('1', 'true', 'True')

def env_log_path() -> str:
    return os.environ.get('TERMRAIN_LOG', DEFAULT_LOG_PATH)

DEBUG = env_flag('TERMRAIN_DEBUG')
LOG_PATH = env_log_path()

def log(msg: str):
    if not DEBUG:
        return
    try:
        with open(LOG_PATH, 'a') as f:
            f.write(f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {msg}\n")
    except OSError:
        pass


# ANSI escape helpers
CSI = "\x1b["
CLEAR_HOME = CSI + '2J' + CSI + 'H'
RESET = CSI + '0m'
ROW_END = "\n"
BLANK = " "

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24


class ConfigError(ValueError):
    """Rejected grid dimensions or animation settings."""


class Speed(enum.Enum):
    SLOW = 'slow'
    MEDIUM = 'medium'
    FAST = 'fast'


class DisplayMode(enum.Enum):
    ALTERNATE = 'alternate'
    GREEN = 'green'
    PURPLE = 'purple'
    WHITE = 'white'


class CellKind(enum.Enum):
    HEAD = 'head'
    TAIL = 'tail'
    BLANK = 'blank'


class State(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'


@dataclass(frozen=True)
class Style:
    head_char: str
    head_code: int
    tail_char: str
    tail_code: int


# Inter-frame delay per speed (milliseconds)
SPEED_DELAYS_MS = {
    Speed.SLOW: 150,
    Speed.MEDIUM: 100,
    Speed.FAST: 50,
}

# Head is the bright SGR code, tail the dim one
STYLES = {
    DisplayMode.ALTERNATE: Style('|', 94, ':', 34),
    DisplayMode.GREEN: Style('|', 92, ':', 32),
    DisplayMode.PURPLE: Style('|', 95, ':', 35),
    DisplayMode.WHITE: Style('|', 97, ':', 37),
}


def _check_exhaustive(table: dict, variants, name: str):
    missing = [v.name for v in variants if v not in table]
    if missing:
        raise ConfigError(f"{name} has no entry for: {', '.join(missing)}")

_check_exhaustive(SPEED_DELAYS_MS, Speed, 'SPEED_DELAYS_MS')
_check_exhaustive(STYLES, DisplayMode, 'STYLES')


def _positive_int(value, name: str) -> int:
    # bool is an int subclass; True would pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value

def _tail_length(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"tail length must be a non-negative integer or None, got {value!r}")
    return value


class Grid:
    """
    Head row per column. The tail is not stored; it is derived from the
    head position at render time.

    rng only needs randint(a, b) over a closed range.
    """
    def __init__(self, width: int, height: int, rng=None):
        self.width = _positive_int(width, 'width')
        self.height = _positive_int(height, 'height')
        self.rng = rng if rng is not None else random.Random()
        self.positions: List[int] = [0] * self.width
        self.seed()

    def seed(self):
        for i in range(self.width):
            self.positions[i] = self.rng.randint(0, self.height - 1)

    def advance(self):
        h = self.height
        positions = self.positions
        for i in range(self.width):
            positions[i] = (positions[i] + 1) % h


def cell_kind(row: int, col: int, positions: List[int], tail_length: Optional[int] = None) -> CellKind:
    head = positions[col]
    if row == head:
        return CellKind.HEAD
    if row < head and (tail_length is None or head - row <= tail_length):
        return CellKind.TAIL
    return CellKind.BLANK

def sgr(code: int, ch: str) -> str:
    return f"{CSI}{code}m{ch}{RESET}"

def paint(kind: CellKind, style: Style) -> str:
    if kind is CellKind.HEAD:
        return sgr(style.head_code, style.head_char)
    if kind is CellKind.TAIL:
        return sgr(style.tail_code, style.tail_char)
    return BLANK

def render_frame(grid: Grid, style: Style, tail_length: Optional[int] = None) -> str:
    parts = [CLEAR_HOME]
    positions = grid.positions
    for row in range(grid.height):
        for col in range(grid.width):
            parts.append(paint(cell_kind(row, col, positions, tail_length), style))
        parts.append(ROW_END)
    return ''.join(parts)


class Renderer:
    """Writes one full frame per call and flushes it."""
    def __init__(self, out=None, mode: DisplayMode = DisplayMode.ALTERNATE,
                 tail_length: Optional[int] = None):
        self.out = out if out is not None else sys.stdout
        self.mode = mode
        self.tail_length = _tail_length(tail_length)

    @property
    def style(self) -> Style:
        return STYLES[self.mode]

    def render(self, grid: Grid):
        self.out.write(render_frame(grid, self.style, self.tail_length))
        self.out.flush()


class Animation:
    """
    Render, advance, sleep; repeat.

    The loop has no exit condition of its own. Pass a stop token (anything
    with is_set(), e.g. threading.Event) to run() to end it between frames;
    otherwise it runs until the process is interrupted.
    """
    def __init__(self, width: int, height: int,
                 speed: Speed = Speed.MEDIUM,
                 mode: DisplayMode = DisplayMode.ALTERNATE,
                 tail_length: Optional[int] = None,
                 rng=None, out=None, sleep=time.sleep):
        self.grid = Grid(width, height, rng)
        self.renderer = Renderer(out, mode, tail_length)
        self.speed = speed
        self.sleep = sleep
        self.state = State.IDLE
        self.frames = 0
        self.configure(speed, mode)

    def configure(self, speed: Optional[Speed] = None,
                  mode: Optional[DisplayMode] = None,
                  tail_length=...):
        if self.state is State.RUNNING:
            raise ConfigError("configuration is fixed once the animation is running")
        if speed is not None:
            if not isinstance(speed, Speed):
                raise ConfigError(f"unknown speed {speed!r}")
            self.speed = speed
        if mode is not None:
            if not isinstance(mode, DisplayMode):
                raise ConfigError(f"unknown display mode {mode!r}")
            self.renderer.mode = mode
        if tail_length is not ...:
            self.renderer.tail_length = _tail_length(tail_length)

    @property
    def mode(self) -> DisplayMode:
        return self.renderer.mode

    @property
    def tail_length(self) -> Optional[int]:
        return self.renderer.tail_length

    def delay_for_speed(self) -> int:
        return SPEED_DELAYS_MS[self.speed]

    def step(self):
        self.renderer.render(self.grid)
        self.grid.advance()
        self.frames += 1

    def run(self, stop=None):
        self.state = State.RUNNING
        delay = self.delay_for_speed() / 1000.0
        log(f'run: {self.grid.width}x{self.grid.height} speed={self.speed.value} '
            f'mode={self.mode.value} tail={self.tail_length}')
        try:
            while stop is None or not stop.is_set():
                self.step()
                self.sleep(delay)
        finally:
            log(f'stopped after {self.frames} frames')
