"""
Celestial objects and the satellite bindings between them.

Every catalogued entity is a single ``CelestialObject`` carrying a ``kind`` tag
and, for galaxies and the star family, a kind-specific payload. Parent/child
links are stored as name keys into the owning ``Catalogue``; the only upward
reference an object keeps is a weak reference to that catalogue, so objects
never extend each other's lifetime.
"""

import logging
import math
import weakref
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import astropy.units as u

from ..config import (
    MIN_REDSHIFT, MAX_REDSHIFT, MIN_DISTANCE_PC, MAX_DISTANCE_PC,
    MIN_MASS_SOLAR, MAX_MASS_SOLAR, MIN_ROTATIONAL_VELOCITY, MAX_ROTATIONAL_VELOCITY,
    MIN_STELLAR_MASS_FRACTION, MAX_STELLAR_MASS_FRACTION,
    MIN_SPECTRAL_DIGIT, MAX_SPECTRAL_DIGIT,
    MIN_ORBIT_DISTANCE, MIN_ORBIT_TILT_DEG, MAX_ORBIT_TILT_DEG, MIN_ORBIT_ECCENTRICITY,
    DEFAULT_ORBIT_DISTANCE, DEFAULT_ORBIT_TILT_DEG, DEFAULT_ORBIT_ECCENTRICITY,
    RECORD_FIELD_DELIMITER, NO_ADDITIONAL_PROPERTIES_TEXT
)
from ..exceptions import (
    InvalidAttributeError, IndexOutOfRangeError, AlreadyParentedError,
    SelfParentParadoxError, CyclicParentageError, DetachedObjectError
)
from .kinds import (
    CelestialKind, HubbleType, SpectralType, LuminosityClass,
    lookup_token, parse_kind
)

log = logging.getLogger(__name__)


def validate_range(attribute: str, value, minimum: Optional[float] = None,
                   maximum: Optional[float] = None) -> float:
    """Coerce ``value`` to float and check it lies within [minimum, maximum].

    Raises:
        InvalidAttributeError: If the value is not numeric, is NaN, or is out of range.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidAttributeError(attribute, value, f"{attribute} must be numeric, got {value!r}")

    if math.isnan(number):
        raise InvalidAttributeError(attribute, value, f"{attribute} must not be NaN")
    if minimum is not None and number < minimum:
        raise InvalidAttributeError(
            attribute, value, f"{attribute} {number} outside valid range [{minimum}, {maximum}]"
        )
    if maximum is not None and number > maximum:
        raise InvalidAttributeError(
            attribute, value, f"{attribute} {number} outside valid range [{minimum}, {maximum}]"
        )
    return number


def validate_name(name) -> str:
    """Names identify objects in files, so they cannot contain the field delimiter."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidAttributeError('name', name, "Object name must be a non-empty string")
    if RECORD_FIELD_DELIMITER in name or '\n' in name or '\r' in name:
        raise InvalidAttributeError(
            'name', name,
            f"Object name '{name}' must not contain '{RECORD_FIELD_DELIMITER}' or line breaks"
        )
    return name


@dataclass(frozen=True)
class GalaxyProperties:
    """Galaxy-specific attributes."""
    stellar_mass_fraction: float = 0.0
    hubble_type: HubbleType = HubbleType.UNASSIGNED

    def __post_init__(self):
        object.__setattr__(self, 'stellar_mass_fraction', validate_range(
            'stellar_mass_fraction', self.stellar_mass_fraction,
            MIN_STELLAR_MASS_FRACTION, MAX_STELLAR_MASS_FRACTION
        ))
        object.__setattr__(self, 'hubble_type',
                           lookup_token(HubbleType, self.hubble_type, 'hubble_type'))

    def describe(self) -> List[str]:
        return [
            f"Hubble Type: {self.hubble_type.value}",
            f"Stellar Mass Fraction: {self.stellar_mass_fraction:g}",
        ]

    def record_fields(self) -> List[str]:
        return [repr(self.stellar_mass_fraction), self.hubble_type.value]


@dataclass(frozen=True)
class StellarProperties:
    """Spectral classification and magnitudes shared by the star family."""
    spectral_type: SpectralType = SpectralType.UNASSIGNED
    spectral_digit: int = 0
    luminosity_class: LuminosityClass = LuminosityClass.UNASSIGNED
    absolute_magnitude: float = 0.0
    apparent_magnitude: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'spectral_type',
                           lookup_token(SpectralType, self.spectral_type, 'spectral_type'))
        object.__setattr__(self, 'luminosity_class',
                           lookup_token(LuminosityClass, self.luminosity_class, 'luminosity_class'))

        digit = validate_range('spectral_digit', self.spectral_digit,
                               MIN_SPECTRAL_DIGIT, MAX_SPECTRAL_DIGIT)
        if not digit.is_integer():
            raise InvalidAttributeError('spectral_digit', self.spectral_digit,
                                        "spectral_digit must be a whole number")
        object.__setattr__(self, 'spectral_digit', int(digit))

        object.__setattr__(self, 'absolute_magnitude',
                           validate_range('absolute_magnitude', self.absolute_magnitude))
        object.__setattr__(self, 'apparent_magnitude',
                           validate_range('apparent_magnitude', self.apparent_magnitude))

    @property
    def classification(self) -> str:
        """MK designation such as ``G2V``; unassigned parts are left out."""
        if self.spectral_type is SpectralType.UNASSIGNED:
            return SpectralType.UNASSIGNED.value
        luminosity = ("" if self.luminosity_class is LuminosityClass.UNASSIGNED
                      else self.luminosity_class.value)
        return f"{self.spectral_type.value}{self.spectral_digit}{luminosity}"

    def describe(self) -> List[str]:
        return [
            f"Stellar Classification: {self.classification}",
            f"Magnitudes: {self.absolute_magnitude:g} (absolute), "
            f"{self.apparent_magnitude:g} (apparent)",
        ]

    def record_fields(self) -> List[str]:
        return [
            self.spectral_type.value,
            str(self.spectral_digit),
            self.luminosity_class.value,
            repr(self.absolute_magnitude),
            repr(self.apparent_magnitude),
        ]


KindProperties = Union[GalaxyProperties, StellarProperties, None]


@dataclass(frozen=True)
class Satellite:
    """A parent -> child binding with its orbital parameters.

    The child is held by name; ``child`` resolves it through the catalogue
    the binding was created in.
    """
    child_name: str
    orbit_distance: float = DEFAULT_ORBIT_DISTANCE
    orbit_tilt: float = DEFAULT_ORBIT_TILT_DEG
    orbit_eccentricity: float = DEFAULT_ORBIT_ECCENTRICITY
    _catalogue_ref: Optional[weakref.ref] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'orbit_distance', validate_range(
            'orbit_distance', self.orbit_distance, MIN_ORBIT_DISTANCE))
        object.__setattr__(self, 'orbit_tilt', validate_range(
            'orbit_tilt', self.orbit_tilt, MIN_ORBIT_TILT_DEG, MAX_ORBIT_TILT_DEG))
        object.__setattr__(self, 'orbit_eccentricity', validate_range(
            'orbit_eccentricity', self.orbit_eccentricity, MIN_ORBIT_ECCENTRICITY))

    @property
    def child(self) -> 'CelestialObject':
        """The bound object.

        Raises:
            DetachedObjectError: If the owning catalogue no longer exists.
            ObjectNotFoundError: If the child has been removed from the catalogue.
        """
        catalogue = self._catalogue_ref() if self._catalogue_ref is not None else None
        if catalogue is None:
            raise DetachedObjectError(
                f"Satellite '{self.child_name}' is not attached to a live catalogue"
            )
        return catalogue.get_object(self.child_name)


class CelestialObject:
    """A catalogued astronomical entity.

    Identity and physical attributes are fixed at construction. The only
    mutations are gaining or losing children through ``add_member`` and
    ``remove_member``.

    Args:
        name: Unique identifier within a catalogue.
        kind: A ``CelestialKind`` or its token (``UNASSIGNED`` is rejected).
        redshift: Redshift, between -1 and 14.
        distance: Distance from the Solar System in parsecs.
        mass: Mass in solar masses.
        rotational_velocity: Rotational velocity in rad/s.
        properties: Kind-specific payload. Galaxies and star-family kinds get
            a default payload when omitted; other kinds must not have one.

    Raises:
        InvalidAttributeError: If any attribute is outside its domain or the
            payload does not fit the kind.
    """

    def __init__(self, name: str, kind: Union[CelestialKind, str],
                 redshift: float = 0.0, distance: float = 0.0, mass: float = 0.0,
                 rotational_velocity: float = 0.0, properties: KindProperties = None):
        self._name = validate_name(name)
        self._kind = parse_kind(kind)
        if self._kind is CelestialKind.UNASSIGNED:
            raise InvalidAttributeError('kind', kind, "Cannot create an object of the Unassigned kind")

        self._redshift = validate_range('redshift', redshift, MIN_REDSHIFT, MAX_REDSHIFT)
        self._distance = validate_range('distance', distance, MIN_DISTANCE_PC, MAX_DISTANCE_PC)
        self._mass = validate_range('mass', mass, MIN_MASS_SOLAR, MAX_MASS_SOLAR)
        self._rotational_velocity = validate_range(
            'rotational_velocity', rotational_velocity,
            MIN_ROTATIONAL_VELOCITY, MAX_ROTATIONAL_VELOCITY
        )
        self._properties = self._check_properties(properties)

        self._parent_name: Optional[str] = None
        self._members: List[Satellite] = []
        self._catalogue_ref: Optional[weakref.ref] = None

    def _check_properties(self, properties: KindProperties) -> KindProperties:
        if self._kind.is_galaxy:
            if properties is None:
                return GalaxyProperties()
            if not isinstance(properties, GalaxyProperties):
                raise InvalidAttributeError('properties', properties,
                                            "Galaxy objects require GalaxyProperties")
        elif self._kind.is_stellar:
            if properties is None:
                return StellarProperties()
            if not isinstance(properties, StellarProperties):
                raise InvalidAttributeError('properties', properties,
                                            f"{self._kind.token} objects require StellarProperties")
        elif properties is not None:
            raise InvalidAttributeError('properties', properties,
                                        f"{self._kind.token} objects have no additional properties")
        return properties

    def __repr__(self):
        return (f"CelestialObject(name={self._name!r}, kind={self._kind.token}, "
                f"members={len(self._members)})")

    # --- Identity and attributes ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> CelestialKind:
        return self._kind

    @property
    def redshift(self) -> float:
        return self._redshift

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def rotational_velocity(self) -> float:
        return self._rotational_velocity

    @property
    def properties(self) -> KindProperties:
        return self._properties

    def quantities(self) -> Dict[str, u.Quantity]:
        """Physical attributes as astropy Quantities."""
        return {
            'distance': self._distance * u.pc,
            'mass': self._mass * u.M_sun,
            'rotational_velocity': self._rotational_velocity * (u.rad / u.s),
        }

    # --- Hierarchy ---

    @property
    def catalogue(self):
        """The catalogue holding this object, or None."""
        return self._catalogue_ref() if self._catalogue_ref is not None else None

    @property
    def parent_name(self) -> Optional[str]:
        return self._parent_name

    @property
    def parent(self) -> Optional['CelestialObject']:
        if self._parent_name is None:
            return None
        return self._require_catalogue().get_object(self._parent_name)

    @property
    def member_count(self) -> int:
        return len(self._members)

    def ancestors(self) -> Iterator['CelestialObject']:
        """Yield the parent, grandparent, ... up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def root(self) -> 'CelestialObject':
        """The topmost ancestor, or the object itself when it has no parent."""
        top = self
        for top in self.ancestors():
            pass
        return top

    def _require_catalogue(self):
        catalogue = self.catalogue
        if catalogue is None:
            raise DetachedObjectError(f"Object '{self._name}' is not held by a catalogue")
        return catalogue

    def add_member(self, child: 'CelestialObject',
                   orbit_distance: float = DEFAULT_ORBIT_DISTANCE,
                   orbit_tilt: float = DEFAULT_ORBIT_TILT_DEG,
                   orbit_eccentricity: float = DEFAULT_ORBIT_ECCENTRICITY) -> Satellite:
        """Make this object the parent of ``child``.

        Checks run before any mutation, so a refused binding leaves both
        objects unchanged.

        Args:
            child: Object to bind. Must be unparented and held by the same catalogue.
            orbit_distance: Orbit distance (>= 0).
            orbit_tilt: Orbit tilt in degrees (-180..180).
            orbit_eccentricity: Orbit eccentricity (>= 0).

        Returns:
            The new Satellite binding.

        Raises:
            AlreadyParentedError: If ``child`` already has a parent.
            SelfParentParadoxError: If ``child`` is this object.
            DetachedObjectError: If the two objects are not held by the same catalogue.
            CyclicParentageError: If this object already descends from ``child``.
            InvalidAttributeError: If an orbital parameter is out of range.
        """
        if child._parent_name is not None:
            current = child.parent
            log.debug(f"Refused binding {self._name} -> {child._name}: already parented to {current.name}")
            raise AlreadyParentedError(child._name, current.name, current.kind.token)

        if child is self:
            raise SelfParentParadoxError(self._name)

        catalogue = self._require_catalogue()
        if child.catalogue is not catalogue:
            raise DetachedObjectError(
                f"Cannot bind '{child._name}' to '{self._name}': objects belong to different catalogues"
            )

        if self.root() is child:
            log.debug(f"Refused binding {self._name} -> {child._name}: closed loop")
            raise CyclicParentageError(self._name, child._name)

        satellite = Satellite(child._name, orbit_distance, orbit_tilt, orbit_eccentricity,
                              _catalogue_ref=self._catalogue_ref)
        self._members.append(satellite)
        child._parent_name = self._name
        log.debug(f"Bound {child.kind.token} '{child._name}' to {self._kind.token} '{self._name}'")
        return satellite

    def remove_member(self, index: int) -> Satellite:
        """Detach the satellite at ``index``; the child becomes a root again.

        Raises:
            IndexOutOfRangeError: If ``index`` is not in [0, member_count).
        """
        self._check_member_index(index)
        satellite = self._members.pop(index)
        catalogue = self.catalogue
        if catalogue is not None and satellite.child_name in catalogue:
            catalogue.get_object(satellite.child_name)._parent_name = None
        log.debug(f"Detached '{satellite.child_name}' from '{self._name}'")
        return satellite

    def _check_member_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Member index must be an int, got {type(index).__name__}")
        if not 0 <= index < len(self._members):
            raise IndexOutOfRangeError(index, len(self._members), f"members of '{self._name}'")

    def get_member(self, index: int) -> Satellite:
        """Return the satellite at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is not in [0, member_count).
        """
        self._check_member_index(index)
        return self._members[index]

    def get_all_members(self) -> Tuple[Satellite, ...]:
        return tuple(self._members)

    # --- Rendering ---

    def get_additional_properties(self) -> List[str]:
        """Kind-specific property lines."""
        if self._properties is None:
            return [NO_ADDITIONAL_PROPERTIES_TEXT]
        return self._properties.describe()

    def get_properties(self) -> str:
        """Full property dump: base attributes, kind-specific lines and children."""
        from ..cli.reporting import format_object_properties
        return format_object_properties(self)

    def export_record(self) -> Tuple[str, List[str]]:
        """Serialize this object.

        Returns:
            Tuple of (object record line, relationship lines for each child).
        """
        from ..data.codec import format_record, format_relationship
        return (format_record(self),
                [format_relationship(self._name, satellite) for satellite in self._members])


def make_galaxy(name: str, redshift: float, distance: float, mass: float,
                rotational_velocity: float, stellar_mass_fraction: float = 0.0,
                hubble_type: Union[HubbleType, str] = HubbleType.UNASSIGNED) -> CelestialObject:
    """Build a galaxy from fully specified attributes."""
    return CelestialObject(
        name, CelestialKind.GALAXY, redshift, distance, mass, rotational_velocity,
        GalaxyProperties(stellar_mass_fraction, hubble_type)
    )


def make_star(name: str, redshift: float, distance: float, mass: float,
              rotational_velocity: float,
              spectral_type: Union[SpectralType, str] = SpectralType.UNASSIGNED,
              spectral_digit: int = 0,
              luminosity_class: Union[LuminosityClass, str] = LuminosityClass.UNASSIGNED,
              absolute_magnitude: float = 0.0, apparent_magnitude: float = 0.0,
              kind: Union[CelestialKind, str] = CelestialKind.STAR) -> CelestialObject:
    """Build any star-family object (Star, Pulsar, Supernova, ...)."""
    kind = parse_kind(kind)
    if not kind.is_stellar:
        raise InvalidAttributeError('kind', kind.token, f"{kind.token} is not a star-family kind")
    return CelestialObject(
        name, kind, redshift, distance, mass, rotational_velocity,
        StellarProperties(spectral_type, spectral_digit, luminosity_class,
                          absolute_magnitude, apparent_magnitude)
    )


def make_body(kind: Union[CelestialKind, str], name: str, redshift: float, distance: float,
              mass: float, rotational_velocity: float) -> CelestialObject:
    """Build an object of a kind without additional properties (Planet, Moon, BlackHole, ...)."""
    kind = parse_kind(kind)
    if kind.is_galaxy or kind.is_stellar:
        raise InvalidAttributeError(
            'kind', kind.token, f"{kind.token} objects need additional properties; "
            f"use make_galaxy or make_star"
        )
    return CelestialObject(name, kind, redshift, distance, mass, rotational_velocity)
