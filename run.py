#!/usr/bin/env python3
"""
Simple runner script for the meeting document search.
Usage: python run.py [command] [options]
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / 'src'
sys.path.insert(0, str(src_path))

if __name__ == '__main__':
    # Import and run the CLI
    from meeting_search.__main__ import cli
    cli()
