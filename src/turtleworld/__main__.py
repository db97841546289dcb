"""
Run with: python -m turtleworld
"""
import sys

from turtleworld.main import main

if __name__ == "__main__":
    sys.exit(main())
