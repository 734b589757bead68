#!/usr/bin/env python3
"""
Terminal Trivia - Main Entry Point

This script runs the terminal trivia game.

Usage:
    python main.py [questions_file] [--config config.json] [--no-timer]

Configuration:
    1. Questions are read from data/questions.json unless a path is given
    2. Game and logging settings can be supplied in a JSON file via --config
    3. Logs are written to ./logs/trivia.log by default
"""

import sys

from trivia.cli import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋 Game stopped by user")
        sys.exit(0)
