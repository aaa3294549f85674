#!/usr/bin/env python3
"""
PhongTrace - A Python Phong Ray Tracer

Main entry point for rendering scenes.
"""

import sys

from phongtrace.cli import main


if __name__ == '__main__':
    sys.exit(main())
