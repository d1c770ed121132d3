"""
Closed type registry for celestial objects.

Defines the set of object kinds together with the classification vocabularies
(Hubble types, spectral types, luminosity classes) that kind-specific payloads
use. Enum values are the tokens written to and read from catalogue files.

Subtype matching follows astronomical membership rather than class layout:
a pulsar is a neutron star, a neutron star is a stellar remnant, and every
stellar remnant in the table is a star. Supernovae share the stellar payload
but only match a query for their own kind.
"""

from enum import Enum
from typing import FrozenSet, Dict, Type, TypeVar, Union

from ..config import LEGACY_KIND_TOKENS
from ..exceptions import InvalidAttributeError

E = TypeVar('E', bound=Enum)


class CelestialKind(Enum):
    """Closed set of object kinds. ``UNASSIGNED`` is a query-only wildcard."""
    UNASSIGNED = "Unassigned"
    GALAXY = "Galaxy"
    STAR = "Star"
    MAIN_SEQUENCE_STAR = "MainSequenceStar"
    RED_GIANT_STAR = "RedGiantStar"
    PLANET = "Planet"
    TERRESTRIAL_PLANET = "TerrestrialPlanet"
    GASEOUS_PLANET = "GaseousPlanet"
    DWARF_PLANET = "DwarfPlanet"
    MOON = "Moon"
    COMET = "Comet"
    ASTEROID = "Asteroid"
    SATELLITE = "Satellite"
    STELLAR_REMNANT = "StellarRemnant"
    SUPERNOVA = "Supernova"
    NEUTRON_STAR = "NeutronStar"
    PULSAR = "Pulsar"
    BLACK_HOLE = "BlackHole"

    @property
    def token(self) -> str:
        return self.value

    @property
    def is_galaxy(self) -> bool:
        return self is CelestialKind.GALAXY

    @property
    def is_stellar(self) -> bool:
        """Whether objects of this kind carry a stellar classification payload."""
        return self in STELLAR_PAYLOAD_KINDS

    def matches(self, query: 'CelestialKind') -> bool:
        return kind_matches(query, self)


class HubbleType(Enum):
    """Hubble morphological classification of galaxies."""
    UNASSIGNED = "Unassigned"
    E0 = "E0"
    E1 = "E1"
    E2 = "E2"
    E3 = "E3"
    E4 = "E4"
    E5 = "E5"
    E6 = "E6"
    E7 = "E7"
    S0 = "S0"
    SA = "Sa"
    SB = "Sb"
    SC = "Sc"
    SBA = "SBa"
    SBB = "SBb"
    SBC = "SBc"
    IRR = "Irr"


class SpectralType(Enum):
    """Harvard spectral classes, hottest first."""
    UNASSIGNED = "Unassigned"
    O = "O"
    B = "B"
    A = "A"
    F = "F"
    G = "G"
    K = "K"
    M = "M"


class LuminosityClass(Enum):
    """Yerkes (MK) luminosity classes."""
    UNASSIGNED = "Unassigned"
    ZERO = "0"
    IA_PLUS = "Ia+"
    IA = "Ia"
    IAB = "Iab"
    IB = "Ib"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"
    VII = "VII"


# Kinds whose objects carry StellarProperties
STELLAR_PAYLOAD_KINDS: FrozenSet[CelestialKind] = frozenset({
    CelestialKind.STAR,
    CelestialKind.MAIN_SEQUENCE_STAR,
    CelestialKind.RED_GIANT_STAR,
    CelestialKind.STELLAR_REMNANT,
    CelestialKind.SUPERNOVA,
    CelestialKind.NEUTRON_STAR,
    CelestialKind.PULSAR,
})

# Query kind -> every object kind it selects. Kinds absent here match only themselves.
SUBTYPE_GROUPS: Dict[CelestialKind, FrozenSet[CelestialKind]] = {
    CelestialKind.STAR: frozenset({
        CelestialKind.STAR,
        CelestialKind.MAIN_SEQUENCE_STAR,
        CelestialKind.RED_GIANT_STAR,
        CelestialKind.STELLAR_REMNANT,
        CelestialKind.NEUTRON_STAR,
        CelestialKind.PULSAR,
    }),
    CelestialKind.STELLAR_REMNANT: frozenset({
        CelestialKind.STELLAR_REMNANT,
        CelestialKind.NEUTRON_STAR,
        CelestialKind.PULSAR,
    }),
    CelestialKind.NEUTRON_STAR: frozenset({
        CelestialKind.NEUTRON_STAR,
        CelestialKind.PULSAR,
    }),
    CelestialKind.PLANET: frozenset({
        CelestialKind.PLANET,
        CelestialKind.TERRESTRIAL_PLANET,
        CelestialKind.GASEOUS_PLANET,
        CelestialKind.DWARF_PLANET,
    }),
}


def kind_matches(query: CelestialKind, kind: CelestialKind) -> bool:
    """Check whether an object of ``kind`` is selected by a ``query`` kind.

    Args:
        query: The kind being searched for. ``UNASSIGNED`` selects everything.
        kind: The concrete kind of a catalogued object.

    Returns:
        True if ``kind`` falls under ``query`` in the subtype table.
    """
    if query is CelestialKind.UNASSIGNED:
        return True
    group = SUBTYPE_GROUPS.get(query)
    if group is not None:
        return kind in group
    return kind is query


def lookup_token(enum_cls: Type[E], token: Union[str, E], attribute: str = None,
                 case_sensitive: bool = True) -> E:
    """Resolve a file/CLI token into a member of ``enum_cls``.

    Args:
        enum_cls: One of the registry enumerations.
        token: Token text, or an existing member (returned unchanged).
        attribute: Attribute name used in the error message.
        case_sensitive: Whether token comparison is exact.

    Returns:
        The matching enum member.

    Raises:
        InvalidAttributeError: If the token is not in the closed table.
    """
    if isinstance(token, enum_cls):
        return token
    attribute = attribute or enum_cls.__name__
    if not isinstance(token, str):
        raise InvalidAttributeError(attribute, token)

    text = token.strip()
    if enum_cls is CelestialKind:
        text = LEGACY_KIND_TOKENS.get(text, text)

    for member in enum_cls:
        if member.value == text:
            return member
    if not case_sensitive:
        folded = text.casefold()
        for member in enum_cls:
            if member.value.casefold() == folded or member.name.casefold() == folded:
                return member

    raise InvalidAttributeError(
        attribute, token,
        f"Unknown {attribute} token '{token}'. "
        f"Valid options: {', '.join(m.value for m in enum_cls)}"
    )


def parse_kind(token: Union[str, CelestialKind], case_sensitive: bool = True) -> CelestialKind:
    """Resolve a kind token, accepting legacy spellings."""
    return lookup_token(CelestialKind, token, 'kind', case_sensitive)


def creatable_kinds():
    """Kinds that concrete objects may be constructed with."""
    return [kind for kind in CelestialKind if kind is not CelestialKind.UNASSIGNED]


class SortParameter(Enum):
    """Attributes a catalogue can be ordered by."""
    NAME = "Name"
    CELESTIAL_TYPE = "CelestialType"
    HUBBLE_TYPE = "HubbleType"
    STELLAR_TYPE = "StellarType"
    REDSHIFT = "Redshift"
    DISTANCE = "Distance"
    MASS = "Mass"
    ROTATIONAL_VELOCITY = "RotationalVelocity"
    MEMBER_COUNT = "MemberCount"


def parse_sort_parameter(token: Union[str, SortParameter]) -> SortParameter:
    """Resolve a sort parameter from its token or member name, ignoring case."""
    return lookup_token(SortParameter, token, 'sort parameter', case_sensitive=False)
