"""
Batch command-line interface for AstraCatalogue.

Loads a catalogue from its object file (plus relationship file) and then
reports on it, lists a filtered/sorted view, re-exports it, or writes a CSV
table.
"""

import argparse
import logging
import sys
from typing import List, Optional

from ..config import (
    DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL,
    EXPORT_CONFLICT_POLICIES, DEFAULT_EXPORT_CONFLICT_POLICY
)
from ..exceptions import CatalogueError, DataLoadError, DataSaveError, DestinationExistsError
from ..core.kinds import CelestialKind, SortParameter, parse_kind, creatable_kinds
from ..utils.io import import_catalogue, resolve_export_paths, export_catalogue, save_catalogue_table
from .reporting import display_object_table, print_import_summary

log = logging.getLogger(__name__)


def create_argument_parser():
    """Create command line argument parser with proper defaults from config."""
    parser = argparse.ArgumentParser(
        description='AstraCatalogue Celestial Object Catalogue',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s report milky_way.dat
  %(prog)s list milky_way.dat --kind Star --sort-by Distance
  %(prog)s export milky_way.dat --output-dir out --on-conflict timestamp
  %(prog)s table milky_way.dat --output milky_way.csv
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging.')

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('object_file',
                        help='Object record file (.dat).')
    common.add_argument('--relationships', '-r', default=None,
                        help='Relationship file. Defaults to <object_file>_relationships.dat.')
    common.add_argument('--sort-by', default=None,
                        choices=[p.value for p in SortParameter],
                        help='Reorder the catalogue before the command runs.')

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('report', parents=[common],
                          help='Print the full catalogue report.')

    list_parser = subparsers.add_parser('list', parents=[common],
                                        help='List objects, optionally filtered by type.')
    list_parser.add_argument('--kind', default=CelestialKind.UNASSIGNED.value,
                             help='Only list objects of this type (subtypes included). One of: '
                                  + ', '.join(kind.token for kind in creatable_kinds()))

    export_parser = subparsers.add_parser('export', parents=[common],
                                          help='Write object and relationship files.')
    export_parser.add_argument('--output-dir', '-o', default='.',
                               help='Directory for the exported files.')
    export_parser.add_argument('--name', default=None,
                               help='Base file name. Defaults to the catalogue name.')
    export_parser.add_argument('--on-conflict', default=DEFAULT_EXPORT_CONFLICT_POLICY,
                               choices=EXPORT_CONFLICT_POLICIES,
                               help='What to do when the destination files exist.')

    table_parser = subparsers.add_parser('table', parents=[common],
                                         help='Save a CSV table with one row per object.')
    table_parser.add_argument('--output', '-o', required=True,
                              help='CSV output path.')

    return parser


def run_report(catalogue, args: argparse.Namespace) -> None:
    print(catalogue.generate_report())


def run_list(catalogue, args: argparse.Namespace) -> None:
    try:
        kind = parse_kind(args.kind, case_sensitive=False)
    except ValueError as e:
        log.error(str(e))
        sys.exit(2)
    objects = catalogue.subselect(kind)
    display_object_table(objects, f"{catalogue.catalogue_name}: {kind.token} objects ({len(objects)})")


def run_export(catalogue, args: argparse.Namespace) -> None:
    name = args.name or catalogue.catalogue_name
    try:
        object_path, relationship_path = resolve_export_paths(args.output_dir, name, args.on_conflict)
    except DestinationExistsError as e:
        log.error(f"{e}. Use --on-conflict overwrite or timestamp.")
        sys.exit(1)
    try:
        objects, relationships = export_catalogue(catalogue, object_path, relationship_path)
    except DataSaveError as e:
        log.error(f"Export failed: {e}")
        sys.exit(1)
    print(f"Wrote {objects} objects to {object_path}")
    print(f"Wrote {relationships} relationships to {relationship_path}")


def run_table(catalogue, args: argparse.Namespace) -> None:
    try:
        save_catalogue_table(catalogue, args.output)
    except DataSaveError as e:
        log.error(f"Could not save table: {e}")
        sys.exit(1)


COMMANDS = {
    'report': run_report,
    'list': run_list,
    'export': run_export,
    'table': run_table,
}


def main(args_list: Optional[List[str]] = None):
    """Main entry point for the catalogue CLI.

    Args:
        args_list: Optional list of command line arguments.
                  If None, will parse from sys.argv
    """
    parser = create_argument_parser()
    args = parser.parse_args(args_list)

    level = logging.DEBUG if args.verbose else getattr(logging, DEFAULT_LOG_LEVEL)
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)

    log.info(f"Loading catalogue from: {args.object_file}")
    try:
        catalogue, report = import_catalogue(args.object_file, args.relationships)
    except DataLoadError as e:
        log.error(f"Could not load the catalogue '{args.object_file}': {e}")
        sys.exit(1)
    print_import_summary(report)

    if args.sort_by:
        try:
            catalogue.sort(args.sort_by)
        except CatalogueError as e:
            log.error(str(e))
            sys.exit(2)

    COMMANDS[args.command](catalogue, args)


if __name__ == "__main__":
    main()
