"""
Line-level encoding of catalogue records and relationships.

Object file, one record per line, ``:``-delimited::

    <Kind>:<name>:<redshift>:<distance>:<mass>:<rotational_velocity>[:<payload>...]

Galaxies append ``stellar_mass_fraction:hubble_type``; the star family appends
``spectral_type:spectral_digit:luminosity_class:absolute_magnitude:apparent_magnitude``.

Relationship file, one binding per line::

    <parent>:<child>:<orbit_distance>:<orbit_tilt>:<orbit_eccentricity>

Floats are written with ``repr`` so that re-importing reproduces them exactly.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, TextIO, Tuple

from ..config import (
    RECORD_FIELD_DELIMITER, BASE_RECORD_FIELD_COUNT, GALAXY_EXTRA_FIELD_COUNT,
    STELLAR_EXTRA_FIELD_COUNT, RELATIONSHIP_FIELD_COUNT
)
from ..exceptions import (
    CatalogueError, InvalidAttributeError, MalformedRecordError, DuplicateNameError,
    ParentingError, UnresolvedRelationshipEndpointError
)
from ..core.kinds import CelestialKind, parse_kind
from ..core.objects import CelestialObject, GalaxyProperties, StellarProperties, Satellite

log = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of an import: counts plus every per-line failure."""
    objects_loaded: int = 0
    relationships_loaded: int = 0
    relationships_missing: bool = False
    errors: List[CatalogueError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        text = (f"Loaded {self.objects_loaded} objects and "
                f"{self.relationships_loaded} relationships")
        if self.errors:
            text += f"; skipped {len(self.errors)} lines"
        return text


# --- Encoding ---

def format_record(obj: CelestialObject) -> str:
    fields = [
        obj.kind.token,
        obj.name,
        repr(obj.redshift),
        repr(obj.distance),
        repr(obj.mass),
        repr(obj.rotational_velocity),
    ]
    if obj.properties is not None:
        fields.extend(obj.properties.record_fields())
    return RECORD_FIELD_DELIMITER.join(fields)


def format_relationship(parent_name: str, satellite: Satellite) -> str:
    return RECORD_FIELD_DELIMITER.join([
        parent_name,
        satellite.child_name,
        repr(satellite.orbit_distance),
        repr(satellite.orbit_tilt),
        repr(satellite.orbit_eccentricity),
    ])


def write_objects(catalogue, sink: TextIO) -> int:
    """Write one record per object, in catalogue order. Returns the count written."""
    count = 0
    for obj in catalogue:
        sink.write(format_record(obj) + '\n')
        count += 1
    return count


def write_relationships(catalogue, sink: TextIO) -> int:
    """Write one line per satellite binding. Returns the count written."""
    count = 0
    for obj in catalogue:
        for satellite in obj.get_all_members():
            sink.write(format_relationship(obj.name, satellite) + '\n')
            count += 1
    return count


# --- Decoding ---

def _split(line: str) -> List[str]:
    return line.rstrip('\r\n').split(RECORD_FIELD_DELIMITER)


def _parse_float(token: str, attribute: str, line: str, line_number: int) -> float:
    try:
        return float(token)
    except ValueError:
        raise MalformedRecordError(
            f"{attribute} '{token}' is not a number", line, line_number
        ) from None


def _expected_field_count(kind: CelestialKind) -> int:
    if kind.is_galaxy:
        return BASE_RECORD_FIELD_COUNT + GALAXY_EXTRA_FIELD_COUNT
    if kind.is_stellar:
        return BASE_RECORD_FIELD_COUNT + STELLAR_EXTRA_FIELD_COUNT
    return BASE_RECORD_FIELD_COUNT


def parse_record(line: str, line_number: int = None) -> CelestialObject:
    """Decode one object record.

    Args:
        line: Record text, with or without a trailing newline.
        line_number: Source line number used in error messages.

    Returns:
        A new, unparented CelestialObject.

    Raises:
        MalformedRecordError: If the kind token is unknown, the field count is
            wrong, a numeric field does not parse, or a value is out of range.
    """
    tokens = _split(line)
    if len(tokens) < BASE_RECORD_FIELD_COUNT:
        raise MalformedRecordError(
            f"expected at least {BASE_RECORD_FIELD_COUNT} fields, found {len(tokens)}",
            line, line_number
        )

    try:
        kind = parse_kind(tokens[0])
    except InvalidAttributeError:
        raise MalformedRecordError(f"unknown object type '{tokens[0]}'", line, line_number) from None
    if kind is CelestialKind.UNASSIGNED:
        raise MalformedRecordError("objects cannot have the Unassigned type", line, line_number)

    expected = _expected_field_count(kind)
    if len(tokens) != expected:
        raise MalformedRecordError(
            f"{kind.token} records have {expected} fields, found {len(tokens)}",
            line, line_number
        )

    name = tokens[1]
    redshift = _parse_float(tokens[2], 'redshift', line, line_number)
    distance = _parse_float(tokens[3], 'distance', line, line_number)
    mass = _parse_float(tokens[4], 'mass', line, line_number)
    rotational_velocity = _parse_float(tokens[5], 'rotational velocity', line, line_number)
    extra = tokens[BASE_RECORD_FIELD_COUNT:]

    try:
        if kind.is_galaxy:
            properties = GalaxyProperties(
                stellar_mass_fraction=_parse_float(extra[0], 'stellar mass fraction', line, line_number),
                hubble_type=extra[1],
            )
        elif kind.is_stellar:
            properties = StellarProperties(
                spectral_type=extra[0],
                spectral_digit=_parse_float(extra[1], 'spectral digit', line, line_number),
                luminosity_class=extra[2],
                absolute_magnitude=_parse_float(extra[3], 'absolute magnitude', line, line_number),
                apparent_magnitude=_parse_float(extra[4], 'apparent magnitude', line, line_number),
            )
        else:
            properties = None
        return CelestialObject(name, kind, redshift, distance, mass, rotational_velocity, properties)
    except InvalidAttributeError as e:
        raise MalformedRecordError(str(e), line, line_number) from e


def parse_relationship(line: str, line_number: int = None) -> Tuple[str, str, float, float, float]:
    """Decode one relationship line into (parent, child, distance, tilt, eccentricity).

    Raises:
        MalformedRecordError: If the field count is wrong or a number does not parse.
    """
    tokens = _split(line)
    if len(tokens) != RELATIONSHIP_FIELD_COUNT:
        raise MalformedRecordError(
            f"relationship lines have {RELATIONSHIP_FIELD_COUNT} fields, found {len(tokens)}",
            line, line_number
        )
    parent_name, child_name = tokens[0], tokens[1]
    return (
        parent_name,
        child_name,
        _parse_float(tokens[2], 'orbit distance', line, line_number),
        _parse_float(tokens[3], 'orbit tilt', line, line_number),
        _parse_float(tokens[4], 'orbit eccentricity', line, line_number),
    )


def import_objects(catalogue, lines: Iterable[str], report: ImportReport) -> None:
    """Parse object records into ``catalogue``; bad lines are logged, skipped and reported."""
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            catalogue.add_object(parse_record(line, line_number))
        except MalformedRecordError as e:
            log.warning(f"Skipping object record: {e}")
            report.errors.append(e)
        except DuplicateNameError as e:
            error = MalformedRecordError(str(e), line.rstrip('\r\n'), line_number)
            log.warning(f"Skipping object record: {error}")
            report.errors.append(error)
        else:
            report.objects_loaded += 1


def import_relationships(catalogue, lines: Iterable[str], report: ImportReport) -> None:
    """Apply relationship lines to objects already in ``catalogue``.

    Each line is resolved by exact name and bound with ``add_member``; a line
    that fails to parse, names an unknown object, or is refused by the
    parenting rules is logged, skipped and reported.
    """
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            parent_name, child_name, distance, tilt, eccentricity = parse_relationship(line, line_number)
            if parent_name not in catalogue:
                raise UnresolvedRelationshipEndpointError(parent_name, 'parent', line_number)
            if child_name not in catalogue:
                raise UnresolvedRelationshipEndpointError(child_name, 'child', line_number)
            parent = catalogue.get_object(parent_name)
            parent.add_member(catalogue.get_object(child_name), distance, tilt, eccentricity)
        except (MalformedRecordError, UnresolvedRelationshipEndpointError) as e:
            log.warning(f"Skipping relationship: {e}")
            report.errors.append(e)
        except (ParentingError, InvalidAttributeError) as e:
            error = MalformedRecordError(str(e), line.rstrip('\r\n'), line_number)
            log.warning(f"Skipping relationship: {error}")
            report.errors.append(error)
        else:
            report.relationships_loaded += 1
