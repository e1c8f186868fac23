"""
임포터 진입점

실행 방법:
    python -m importer import <sequence>
"""

import asyncio
import sys

from importer.cli import main

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
