#!/usr/bin/env python
"""
Launcher script for the Film Recipes command-line tools.

This script ensures the correct Python path is set before running the CLI.
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

# Now import and run the CLI
from film_recipes.utils.import_export_cli import main

if __name__ == "__main__":
    sys.exit(main())
