"""
Entry Point Script (Bootstrap)
==============================
Runs the simulation straight from a source checkout.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It modifies 'sys.path' so that 'from springmassdamper...' resolves
   without installing the package.

Usage:
    $ python run.py          # plain PID run
    $ python run.py tuned    # PID run followed by auto-tuning
"""
import sys
import os

# Add the 'src' directory to the Python path
current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from springmassdamper.__main__ import cli

if __name__ == "__main__":
    sys.exit(cli())
