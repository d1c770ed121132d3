"""
The Catalogue: a named, ordered arena owning every celestial object in it.

Objects refer to one another only by name; the catalogue's name index is the
single place those names are resolved. Sorting, subtype queries and bulk
import/export all go through here.
"""

import logging
import weakref
from typing import Callable, Dict, Iterable, Iterator, List, Optional, TextIO, Tuple, Union

import pandas as pd

from ..config import CATALOGUE_TABLE_COLUMNS
from ..exceptions import (
    CatalogueError, DuplicateNameError, ObjectNotFoundError,
    IndexOutOfRangeError, UnsupportedSortKeyError
)
from .kinds import CelestialKind, SortParameter, parse_kind, parse_sort_parameter
from .objects import CelestialObject

log = logging.getLogger(__name__)

# Whole-catalogue sort keys. Parameters missing here are rejected by Catalogue.sort.
SORT_KEYS: Dict[SortParameter, Callable[[CelestialObject], object]] = {
    SortParameter.NAME: lambda obj: obj.name.casefold(),
    SortParameter.REDSHIFT: lambda obj: obj.redshift,
    SortParameter.DISTANCE: lambda obj: obj.distance,
    SortParameter.MASS: lambda obj: obj.mass,
    SortParameter.ROTATIONAL_VELOCITY: lambda obj: obj.rotational_velocity,
    SortParameter.MEMBER_COUNT: lambda obj: obj.member_count,
}


class Catalogue:
    """Named, ordered collection that owns its objects.

    Args:
        catalogue_name: Display name, also used for default export file names.
    """

    def __init__(self, catalogue_name: str = ""):
        self.catalogue_name = catalogue_name
        self._objects: List[CelestialObject] = []
        self._index: Dict[str, CelestialObject] = {}

    def __repr__(self):
        return f"Catalogue(name={self.catalogue_name!r}, objects={len(self._objects)})"

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[CelestialObject]:
        return iter(list(self._objects))

    def __contains__(self, item) -> bool:
        if isinstance(item, CelestialObject):
            return self._index.get(item.name) is item
        return item in self._index

    def __getitem__(self, key: Union[str, int]) -> CelestialObject:
        return self.get_object(key)

    @classmethod
    def from_files(cls, object_path, relationship_path=None) -> 'Catalogue':
        """Build a catalogue from an object file and its relationship file.

        Per-line failures are logged and skipped; use
        ``utils.io.import_catalogue`` to also receive the ImportReport.
        """
        from ..utils.io import import_catalogue
        catalogue, _ = import_catalogue(object_path, relationship_path)
        return catalogue

    # --- Membership ---

    def add_object(self, obj: CelestialObject) -> CelestialObject:
        """Take ownership of a newly constructed object.

        An object whose previous catalogue has been garbage collected is
        accepted as a root; its old parent and satellite links are dropped.

        Raises:
            DuplicateNameError: If an object with the same name is already held.
            CatalogueError: If the object already belongs to a catalogue.
        """
        if obj.name in self._index:
            log.debug(f"Rejected duplicate name '{obj.name}' in catalogue '{self.catalogue_name}'")
            raise DuplicateNameError(obj.name, self.catalogue_name)
        if obj.catalogue is not None:
            raise CatalogueError(
                f"Object '{obj.name}' already belongs to catalogue '{obj.catalogue.catalogue_name}'"
            )
        if obj.parent_name is not None or obj.member_count:
            # Links left over from a catalogue that no longer exists
            log.debug(f"Clearing stale parent/child links of '{obj.name}'")
            obj._parent_name = None
            obj._members = []

        obj._catalogue_ref = weakref.ref(self)
        self._objects.append(obj)
        self._index[obj.name] = obj
        return obj

    def remove_object(self, name: str) -> CelestialObject:
        """Remove an object, unlinking it from its parent and releasing its children.

        Children stay in the catalogue as roots.

        Raises:
            ObjectNotFoundError: If no object has this name.
        """
        obj = self.get_object(name)

        parent = obj.parent
        if parent is not None:
            parent._members = [sat for sat in parent._members if sat.child_name != obj.name]
            obj._parent_name = None

        for satellite in obj._members:
            child = self._index.get(satellite.child_name)
            if child is not None:
                child._parent_name = None
        obj._members = []

        self._objects.remove(obj)
        del self._index[obj.name]
        obj._catalogue_ref = None
        log.debug(f"Removed '{name}' from catalogue '{self.catalogue_name}'")
        return obj

    # --- Lookup ---

    def get_object(self, key: Union[str, int]) -> CelestialObject:
        """Look up an object by exact name or by position.

        Raises:
            ObjectNotFoundError: If no object has the given name.
            IndexOutOfRangeError: If the position is not in [0, len).
        """
        if isinstance(key, bool):
            raise TypeError("Catalogue keys must be a name or an integer index")
        if isinstance(key, int):
            if not 0 <= key < len(self._objects):
                raise IndexOutOfRangeError(key, len(self._objects), f"catalogue '{self.catalogue_name}'")
            return self._objects[key]
        try:
            return self._index[key]
        except KeyError:
            raise ObjectNotFoundError(key, self.catalogue_name) from None

    def names(self) -> List[str]:
        return [obj.name for obj in self._objects]

    def roots(self) -> List[CelestialObject]:
        """Objects without a parent, in catalogue order."""
        return [obj for obj in self._objects if obj.parent_name is None]

    def subselect(self, kind: Union[CelestialKind, str]) -> List[CelestialObject]:
        """All objects falling under ``kind``, in catalogue order.

        ``Unassigned`` selects every object. Star selects the whole star family
        except supernovae, Planet selects every planet kind, and so on.
        """
        query = parse_kind(kind)
        return [obj for obj in self._objects if obj.kind.matches(query)]

    # --- Ordering ---

    def sort(self, parameter: Union[SortParameter, str]) -> None:
        """Reorder the catalogue ascending by ``parameter``.

        The sort is stable and names compare case-insensitively.

        Raises:
            UnsupportedSortKeyError: If the parameter cannot order a mixed
                catalogue. The catalogue is left unchanged.
        """
        try:
            parameter = parse_sort_parameter(parameter)
        except ValueError:
            raise UnsupportedSortKeyError(parameter) from None

        key = SORT_KEYS.get(parameter)
        if key is None:
            log.debug(f"Sort by {parameter.value} is not supported for a whole catalogue")
            raise UnsupportedSortKeyError(parameter.value)

        self._objects = sorted(self._objects, key=key)
        self._index = {obj.name: obj for obj in self._objects}
        log.info(f"Sorted catalogue '{self.catalogue_name}' by {parameter.value}")

    # --- Bulk import/export ---

    def import_from(self, object_lines: Iterable[str],
                    relationship_lines: Optional[Iterable[str]] = None):
        """Load objects, then relationships, skipping and reporting bad lines.

        Returns:
            ImportReport describing what was loaded and what was skipped.
        """
        from ..data.codec import ImportReport, import_objects, import_relationships
        report = ImportReport()
        import_objects(self, object_lines, report)
        if relationship_lines is not None:
            import_relationships(self, relationship_lines, report)
        return report

    def export_to(self, object_sink: TextIO, relationship_sink: TextIO) -> Tuple[int, int]:
        """Write object records and relationship lines to two text sinks.

        Returns:
            Tuple of (objects written, relationships written).
        """
        from ..data.codec import write_objects, write_relationships
        return write_objects(self, object_sink), write_relationships(self, relationship_sink)

    # --- Views ---

    def to_dataframe(self) -> pd.DataFrame:
        """One row per object, in catalogue order."""
        rows = [{
            'name': obj.name,
            'kind': obj.kind.token,
            'redshift': obj.redshift,
            'distance_pc': obj.distance,
            'mass_solar': obj.mass,
            'rotational_velocity': obj.rotational_velocity,
            'parent': obj.parent_name,
            'member_count': obj.member_count,
        } for obj in self._objects]
        return pd.DataFrame(rows, columns=CATALOGUE_TABLE_COLUMNS)

    def generate_report(self) -> str:
        from ..cli.reporting import format_catalogue_report
        return format_catalogue_report(self)
