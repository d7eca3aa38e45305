# src/todo_mcp/__main__.py

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
