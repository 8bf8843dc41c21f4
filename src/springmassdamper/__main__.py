"""Command-line interface."""
import sys
from typing import Optional

from springmassdamper.main import main, main_tuned

USAGE = "usage: python -m springmassdamper [tuned]"


def cli(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        return main()
    if args == ["tuned"]:
        return main_tuned()
    print(USAGE, file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(cli())
