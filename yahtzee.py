#!/usr/bin/env python3
"""
Unified entry point for all Pocket Dice interfaces.

Usage:
    python yahtzee.py                           # Default: pygame
    python yahtzee.py --ui tui                  # Terminal (Textual)
    python yahtzee.py --ui web                  # Browser (Flask)
    python yahtzee.py --ui tui --seed 7         # Reproducible dice
    python yahtzee.py --ui web --port 8080      # Web on custom port

Individual entry points (main.py, tui.py, web.py) still work independently.
"""
import argparse


def main(argv=None):
    # Pre-parse just the --ui flag, pass everything else through
    parser = argparse.ArgumentParser(
        description="Pocket Dice — play in pygame, terminal, or browser",
        add_help=False,
    )
    parser.add_argument("--ui", choices=["pygame", "tui", "web"], default="pygame",
                        help="Interface: pygame (default), tui (terminal), web (browser)")
    args, remaining = parser.parse_known_args(argv)

    if args.ui == "pygame":
        from main import main as run_pygame
        run_pygame(remaining)

    elif args.ui == "tui":
        from tui import main as run_tui
        run_tui(remaining)

    elif args.ui == "web":
        from web import main as run_web
        run_web(remaining)


if __name__ == "__main__":
    main()
