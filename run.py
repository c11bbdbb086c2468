#!/usr/bin/env python3
"""
WANDCRAFT Launcher
===================
Run this script to start the wand casting sandbox.
"""

from wandcraft.main import main

if __name__ == "__main__":
    main()
