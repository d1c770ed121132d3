"""
Text rendering for celestial objects and catalogues.

Property dumps, whole-catalogue reports and the console tables printed by the
CLI live here, apart from the data model, so presentation can change without
touching the catalogue core.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

import astropy.units as u
import numpy as np

from ..config import (
    REPORT_OBJECT_SEPARATOR, REPORT_HEADER_SEPARATOR, NO_CHILDREN_TEXT,
    CLI_DISPLAY_LINE_WIDTH, CLI_NAME_COLUMN_WIDTH, CLI_KIND_COLUMN_WIDTH,
    CLI_NUMERIC_PRECISION, CLI_VALUE_NOT_AVAILABLE, CLI_COLUMN_SEPARATOR
)

log = logging.getLogger(__name__)


def format_satellite(satellite) -> List[str]:
    """Two report lines describing a child binding."""
    child = satellite.child
    return [
        f"- Name: {child.name}, Type: {child.kind.token}, Number of Children: {child.member_count}",
        f"  Orbital Distance: {satellite.orbit_distance:g} pc, "
        f"Orbital Tilt: {satellite.orbit_tilt:g} deg, "
        f"Orbital Eccentricity: {satellite.orbit_eccentricity:g}",
    ]


def format_object_properties(obj) -> str:
    """
    Render the full property dump of one object.

    Base attributes come first, then the kind-specific lines and finally one
    entry per child satellite.

    Args:
        obj: The CelestialObject to describe

    Returns:
        Multi-line text ending with the object separator
    """
    quantities = obj.quantities()
    distance = quantities['distance']

    lines = [
        f"Name: {obj.name}",
        f"Object Type: {obj.kind.token}",
        f"Mass: {quantities['mass'].value:g} M_Sun",
        f"Rotational Velocity: {quantities['rotational_velocity'].value:g} rad s^-1",
        f"Distance from Solar System: {distance.value:g} pc "
        f"({distance.to(u.lyr).value:.{CLI_NUMERIC_PRECISION}g} ly)",
        f"Redshift: {obj.redshift:g}",
    ]
    if obj.parent_name is not None:
        lines.append(f"Parent: {obj.parent_name}")

    lines.append("Additional properties:")
    lines.extend(f"  {line}" for line in obj.get_additional_properties())

    satellites = obj.get_all_members()
    lines.append(f"Child objects ({len(satellites)}):")
    if satellites:
        for satellite in satellites:
            lines.extend(format_satellite(satellite))
    else:
        lines.append(NO_CHILDREN_TEXT)

    lines.append(REPORT_OBJECT_SEPARATOR)
    return "\n".join(lines)


def catalogue_statistics(catalogue) -> Dict[str, Any]:
    """
    Summary statistics over a catalogue.

    Returns:
        Dictionary with the object count, per-kind counts, and mean/median
        distance and mean redshift (None for an empty catalogue)
    """
    objects = list(catalogue)
    stats = {
        'total_objects': len(objects),
        'kind_counts': dict(Counter(obj.kind.token for obj in objects)),
        'root_objects': len(catalogue.roots()),
        'mean_distance_pc': None,
        'median_distance_pc': None,
        'mean_redshift': None,
    }
    if objects:
        distances = np.array([obj.distance for obj in objects])
        redshifts = np.array([obj.redshift for obj in objects])
        stats['mean_distance_pc'] = float(np.mean(distances))
        stats['median_distance_pc'] = float(np.median(distances))
        stats['mean_redshift'] = float(np.mean(redshifts))
    return stats


def _format_optional(value: Optional[float]) -> str:
    if value is None:
        return CLI_VALUE_NOT_AVAILABLE
    return f"{value:.{CLI_NUMERIC_PRECISION}g}"


def format_catalogue_report(catalogue) -> str:
    """Render the catalogue header, summary statistics and every object's property dump."""
    stats = catalogue_statistics(catalogue)
    lines = [
        f"Catalogue: {catalogue.catalogue_name}",
        f"Total number of objects: {stats['total_objects']}",
        f"Root objects: {stats['root_objects']}",
    ]
    if stats['kind_counts']:
        lines.append("Objects by type: " + ", ".join(
            f"{kind}: {count}" for kind, count in sorted(stats['kind_counts'].items())
        ))
    lines.append(f"Mean distance: {_format_optional(stats['mean_distance_pc'])} pc, "
                 f"median distance: {_format_optional(stats['median_distance_pc'])} pc")
    lines.append(f"Mean redshift: {_format_optional(stats['mean_redshift'])}")
    lines.append(REPORT_HEADER_SEPARATOR)
    lines.append("Object information:")
    lines.append(REPORT_HEADER_SEPARATOR)
    for obj in catalogue:
        lines.append(format_object_properties(obj))
    return "\n".join(lines)


def format_object_row(obj) -> str:
    """One fixed-width console row: name, kind, distance, mass, parent and child count."""
    parent = obj.parent_name or CLI_VALUE_NOT_AVAILABLE
    return CLI_COLUMN_SEPARATOR.join([
        f"{obj.name:<{CLI_NAME_COLUMN_WIDTH}}",
        f"{obj.kind.token:<{CLI_KIND_COLUMN_WIDTH}}",
        f"{obj.distance:>12.{CLI_NUMERIC_PRECISION}g} pc",
        f"{obj.mass:>12.{CLI_NUMERIC_PRECISION}g} M_Sun",
        f"parent: {parent}",
        f"children: {obj.member_count}",
    ])


def display_object_table(objects: List, title: str) -> None:
    """Print a table of objects to the console."""
    if not objects:
        print("No objects to display.")
        return

    print("\n" + "=" * CLI_DISPLAY_LINE_WIDTH)
    print(title)
    print("=" * CLI_DISPLAY_LINE_WIDTH)
    for i, obj in enumerate(objects, 1):
        print(f"{i:3d}. {format_object_row(obj)}")
    print("-" * CLI_DISPLAY_LINE_WIDTH)


def print_import_summary(report) -> None:
    """Print load counts and each skipped line of an ImportReport."""
    print(report.summary())
    if report.relationships_missing:
        print("No relationship file found; objects were loaded unparented.")
    for error in report.errors:
        print(f"  skipped {error}")
