#!/usr/bin/env python
"""
AstraCatalogue - Celestial Object Catalogue

Main entry point for the AstraCatalogue tools. Loads catalogues of galaxies,
stars, planets and their satellites from flat text files and reports on,
lists, re-exports or tabulates them.

Version: 1.0.0
"""

import sys
import argparse

# Version information for reproducibility of exported catalogues
__version__ = "1.0.0"


def main():
    """Main entry point for AstraCatalogue."""
    parser = argparse.ArgumentParser(
        description=f'AstraCatalogue v{__version__} - Celestial Object Catalogue',
        epilog='Use "catalogue" followed by report, list, export or table.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('tool',
                        choices=['catalogue'],
                        help='Tool to run')
    parser.add_argument('--version', action='version',
                        version=f'AstraCatalogue {__version__}')

    args, remaining_args = parser.parse_known_args()

    try:
        if args.tool == 'catalogue':
            from astracatalogue.cli.main import main as catalogue_main
            catalogue_main(remaining_args)
    except ImportError as e:
        print(f"ERROR: Failed to import required module: {e}", file=sys.stderr)
        print("Ensure all dependencies are installed: pip install -e .", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)  # Standard exit code for SIGINT


if __name__ == "__main__":
    main()
