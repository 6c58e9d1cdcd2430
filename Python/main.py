import sys
import os

# Ensure we can import the bricks package
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from bricks.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
