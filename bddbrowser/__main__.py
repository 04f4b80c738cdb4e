#!/usr/bin/env python3
"""Run the bddbrowser CLI with ``python -m bddbrowser``."""

from bddbrowser.cli.main import main

if __name__ == "__main__":
    main()
