#!/usr/bin/env python3
"""
termrain - digital rain in the terminal

Usage:
    ./termrain_cli.py --width 80 --height 24 --speed medium --mode alternate --tail 8

Runs until interrupted (Ctrl-C).
"""
import argparse
import random
import sys

from termrain import (
    CLEAR_HOME,
    CSI,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    RESET,
    Animation,
    ConfigError,
    DisplayMode,
    Speed,
    log,
)

# Terminal control
def hide_cursor(out):
    out.write(CSI + '?25l')

def show_cursor(out):
    out.write(CSI + '?25h')

def restore(out):
    out.write(RESET)
    show_cursor(out)
    out.write(CLEAR_HOME)
    out.flush()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='termrain', description='Column-based digital rain.')
    p.add_argument('--width', type=int, default=DEFAULT_WIDTH)
    p.add_argument('--height', type=int, default=DEFAULT_HEIGHT)
    p.add_argument('--speed', choices=[s.value for s in Speed], default=Speed.MEDIUM.value)
    p.add_argument('--mode', choices=[m.value for m in DisplayMode], default=DisplayMode.ALTERNATE.value)
    p.add_argument('--tail', type=int, default=None,
                   help='tail length in rows (default: every row above the head)')
    p.add_argument('--seed', type=int, default=None)
    return p


def make_animation(args, out=None) -> Animation:
    rng = random.Random(args.seed)
    return Animation(
        args.width,
        args.height,
        speed=Speed(args.speed),
        mode=DisplayMode(args.mode),
        tail_length=args.tail,
        rng=rng,
        out=out,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        anim = make_animation(args)
    except ConfigError as e:
        parser.error(str(e))

    log(f'termrain starting: {vars(args)}')
    out = sys.stdout
    hide_cursor(out)
    try:
        anim.run()
    except KeyboardInterrupt:
        restore(out)
        sys.exit(0)


if __name__ == "__main__":
    main()
