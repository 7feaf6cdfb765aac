"""
Import/Export CLI Utility

Command-line interface for loading recipe spreadsheets and exporting the
public recipe JSON.

Usage Examples:
    # Create tables and seed setting definitions
    film-recipes init-db

    # Wipe the database and start over
    film-recipes init-db --reset --yes

    # Preview a recipe spreadsheet import without committing
    film-recipes import recipes.csv --dry-run

    # Replace all recipes with the contents of a spreadsheet
    film-recipes import recipes.csv --truncate

    # Import authors
    film-recipes import-authors authors.csv

    # Export every active recipe
    film-recipes export -o public/recipes.json --active-only

    # Export a single recipe
    film-recipes export -o recipe_42.json --recipe-id 42
"""

import argparse
import logging
import sys
from typing import List, Optional

from film_recipes.services.author_import_service import import_authors_from_csv
from film_recipes.services.database import (
    initialize_app_database,
    reset_database,
    session_scope,
    truncate_recipe_data,
)
from film_recipes.services.exceptions import ServiceError
from film_recipes.services.recipe_export_service import (
    ExportOptions,
    export_recipe_by_id,
    export_recipes,
)
from film_recipes.services.recipe_import_service import import_recipes_from_csv
from film_recipes.services.reference_data_service import seed_reference_data
from film_recipes.utils.constants import APP_NAME, APP_VERSION


def init_db(reset: bool = False, confirm: bool = False) -> int:
    """Create tables and seed reference data, optionally wiping every table first."""
    if reset:
        if not confirm:
            print("ERROR: --reset deletes all data; pass --yes to confirm")
            return 1
        reset_database(confirm=True)
        print("All tables dropped and recreated")
    counts = seed_reference_data()
    print("Database initialized")
    for table, count in counts.items():
        print(f"  {table}: {count}")
    return 0


def import_recipes(csv_file: str, dry_run: bool = False, truncate: bool = False) -> int:
    """Import a recipe spreadsheet."""
    mode = " (dry run)" if dry_run else ""
    print(f"Importing recipes from {csv_file}{mode}...")
    result = import_recipes_from_csv(csv_file, dry_run=dry_run, truncate=truncate)
    print(result.get_summary())
    return 1 if result.has_errors else 0


def import_authors(csv_file: str, dry_run: bool = False) -> int:
    """Import an author spreadsheet."""
    mode = " (dry run)" if dry_run else ""
    print(f"Importing authors from {csv_file}{mode}...")
    result = import_authors_from_csv(csv_file, dry_run=dry_run)
    print(result.get_summary())
    return 0


def export(
    output: Optional[str],
    recipe_id: Optional[int] = None,
    active_only: bool = False,
    featured_only: bool = False,
    dry_run: bool = False,
    compact: bool = False,
) -> int:
    """Export recipes, or one recipe when recipe_id is given."""
    options = ExportOptions(
        output_path=output,
        pretty_print=not compact,
        active_only=active_only,
        featured_only=featured_only,
        dry_run=dry_run,
    )

    if recipe_id is not None:
        print(f"Exporting recipe {recipe_id}...")
        stats = export_recipe_by_id(recipe_id, options)
    else:
        print("Exporting recipes...")
        stats = export_recipes(options)

    print(stats.get_summary())
    return 1 if stats.errors else 0


def truncate(confirmed: bool) -> int:
    """Delete every recipe and its recipe-scoped rows."""
    if not confirmed:
        print("ERROR: truncate deletes all recipes; pass --yes to confirm")
        return 1

    with session_scope() as session:
        deleted = truncate_recipe_data(session)

    print("Recipe data truncated")
    for table, count in deleted.items():
        print(f"  {table}: {count}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="film-recipes",
        description=f"Import/Export utility for {APP_NAME} v{APP_VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Initialize the database:
    film-recipes init-db

  Preview an import:
    film-recipes import recipes.csv --dry-run

  Export active recipes:
    film-recipes export -o public/recipes.json --active-only
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    init_parser = subparsers.add_parser("init-db", help="Create tables and seed setting definitions")
    init_parser.add_argument(
        "--reset", action="store_true", help="Drop and recreate every table first"
    )
    init_parser.add_argument("--yes", action="store_true", help="Confirm --reset")

    import_parser = subparsers.add_parser("import", help="Import a recipe spreadsheet (CSV)")
    import_parser.add_argument("file", help="CSV file path")
    import_parser.add_argument(
        "--dry-run", action="store_true", help="Process every row, then roll back"
    )
    import_parser.add_argument(
        "--truncate",
        action="store_true",
        help="Delete existing recipes first, in the same transaction",
    )

    authors_parser = subparsers.add_parser("import-authors", help="Import an author spreadsheet")
    authors_parser.add_argument("file", help="CSV file path")
    authors_parser.add_argument(
        "--dry-run", action="store_true", help="Process every row, then roll back"
    )

    export_parser = subparsers.add_parser("export", help="Export recipes as JSON")
    export_parser.add_argument("-o", "--output", dest="output", help="Output JSON file path")
    export_parser.add_argument("--recipe-id", type=int, help="Export a single recipe")
    export_parser.add_argument("--active-only", action="store_true", help="Only active recipes")
    export_parser.add_argument(
        "--featured-only", action="store_true", help="Only featured recipes"
    )
    export_parser.add_argument(
        "--dry-run", action="store_true", help="Report statistics without writing"
    )
    export_parser.add_argument(
        "--compact", action="store_true", help="Write JSON without indentation"
    )

    truncate_parser = subparsers.add_parser("truncate", help="Delete all recipe data")
    truncate_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "export" and not args.output and not args.dry_run:
        parser.error("export requires --output unless --dry-run is given")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        initialize_app_database()

        if args.command == "init-db":
            return init_db(reset=args.reset, confirm=args.yes)
        elif args.command == "import":
            seed_reference_data()
            return import_recipes(args.file, dry_run=args.dry_run, truncate=args.truncate)
        elif args.command == "import-authors":
            return import_authors(args.file, dry_run=args.dry_run)
        elif args.command == "export":
            return export(
                args.output,
                recipe_id=args.recipe_id,
                active_only=args.active_only,
                featured_only=args.featured_only,
                dry_run=args.dry_run,
                compact=args.compact,
            )
        elif args.command == "truncate":
            return truncate(args.yes)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1
    except Exception as e:
        logging.getLogger(__name__).exception("Command %s failed", args.command)
        print(f"ERROR: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
