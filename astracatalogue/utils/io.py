import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..config import (
    OBJECT_FILE_EXTENSION, RELATIONSHIP_FILE_SUFFIX, EXPORT_TIMESTAMP_FORMAT,
    EXPORT_CONFLICT_POLICIES, ENCODING_FALLBACK_ORDER, OUTPUT_ENCODING
)
from ..exceptions import DataLoadError, DataSaveError, DestinationExistsError
from ..core.catalogue import Catalogue
from ..data.codec import ImportReport, import_objects, import_relationships

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def relationship_path_for(object_path: PathLike) -> Path:
    """Derive the companion relationship file, e.g. ``stars.dat`` -> ``stars_relationships.dat``."""
    path = Path(object_path)
    suffix = path.suffix or OBJECT_FILE_EXTENSION
    return path.with_name(f"{path.stem}{RELATIONSHIP_FILE_SUFFIX}{suffix}")


def read_lines(filepath: PathLike) -> List[str]:
    """Read a text file into lines, trying each encoding in ENCODING_FALLBACK_ORDER.

    Raises:
        DataLoadError: If the file is missing, unreadable, or cannot be decoded.
    """
    for encoding in ENCODING_FALLBACK_ORDER:
        try:
            with open(filepath, 'r', encoding=encoding) as f:
                # Records end at \n only; other Unicode line boundaries may appear in names
                lines = f.read().split('\n')
            if lines and not lines[-1]:
                lines.pop()
            log.debug(f"Read {len(lines)} lines from {filepath} ({encoding})")
            return lines
        except UnicodeDecodeError:
            log.debug(f"Encoding {encoding} failed for {filepath}, trying next")
            continue
        except FileNotFoundError:
            log.error(f"File not found: {filepath}")
            raise DataLoadError(f"File not found: {filepath}")
        except IsADirectoryError:
            raise DataLoadError(f"Expected a file but found a directory: {filepath}")
        except PermissionError:
            log.error(f"Permission denied reading {filepath}")
            raise DataLoadError(f"Permission denied accessing file: {filepath}")

    raise DataLoadError(f"Could not decode file '{filepath}' with any supported encoding")


def import_catalogue(object_path: PathLike, relationship_path: Optional[PathLike] = None,
                     catalogue_name: Optional[str] = None) -> Tuple[Catalogue, ImportReport]:
    """Load a catalogue from its object file and (optional) relationship file.

    The catalogue is named after the object file stem unless ``catalogue_name``
    is given. When no relationship path is passed, the companion file next to
    the object file is used if it exists. A missing relationship file is not
    an error: objects still load, unparented.

    Args:
        object_path: Path to the object record file.
        relationship_path: Path to the relationship file.
        catalogue_name: Name for the new catalogue.

    Returns:
        Tuple of (catalogue, import report).

    Raises:
        DataLoadError: If the object file cannot be read.
    """
    object_path = Path(object_path)
    catalogue = Catalogue(catalogue_name or object_path.stem)
    report = ImportReport()

    import_objects(catalogue, read_lines(object_path), report)

    relationship_path = Path(relationship_path) if relationship_path else relationship_path_for(object_path)
    if relationship_path.is_file():
        import_relationships(catalogue, read_lines(relationship_path), report)
    else:
        report.relationships_missing = True
        log.warning(f"Relationship file {relationship_path} not found; "
                    f"objects will require manual parenting")

    log.info(f"Catalogue '{catalogue.catalogue_name}': {report.summary()}")
    return catalogue, report


def resolve_export_paths(directory: PathLike, catalogue_name: str, policy: str = 'error',
                         timestamp: Optional[datetime] = None) -> Tuple[Path, Path]:
    """Choose the object and relationship file paths for an export.

    Args:
        directory: Output directory.
        catalogue_name: Base file name.
        policy: What to do when either target exists: ``error`` raises,
            ``overwrite`` reuses the paths, ``timestamp`` suffixes both
            names with the current time.
        timestamp: Time used for the ``timestamp`` policy (defaults to now).

    Returns:
        Tuple of (object file path, relationship file path).

    Raises:
        ValueError: If the policy is unknown or the name is empty.
        DestinationExistsError: If a target exists under the ``error`` policy.
    """
    if policy not in EXPORT_CONFLICT_POLICIES:
        raise ValueError(f"Unknown conflict policy '{policy}'. "
                         f"Valid options: {', '.join(EXPORT_CONFLICT_POLICIES)}")
    if not catalogue_name:
        raise ValueError("Export requires a non-empty catalogue name")

    directory = Path(directory)
    object_path = directory / f"{catalogue_name}{OBJECT_FILE_EXTENSION}"
    relationship_path = relationship_path_for(object_path)
    existing = [path for path in (object_path, relationship_path) if path.exists()]
    if not existing or policy == 'overwrite':
        return object_path, relationship_path

    if policy == 'error':
        raise DestinationExistsError(existing[0])

    stamp = (timestamp or datetime.now()).strftime(EXPORT_TIMESTAMP_FORMAT)
    object_path = directory / f"{catalogue_name}_{stamp}{OBJECT_FILE_EXTENSION}"
    log.info(f"Export destination exists; writing to {object_path.name} instead")
    return object_path, relationship_path_for(object_path)


def export_catalogue(catalogue: Catalogue, object_path: PathLike,
                     relationship_path: Optional[PathLike] = None) -> Tuple[int, int]:
    """Write a catalogue's object and relationship files.

    Returns:
        Tuple of (objects written, relationships written).

    Raises:
        DataSaveError: If either file cannot be written.
    """
    object_path = Path(object_path)
    relationship_path = Path(relationship_path) if relationship_path else relationship_path_for(object_path)
    try:
        with open(object_path, 'w', encoding=OUTPUT_ENCODING, newline='\n') as object_sink, \
                open(relationship_path, 'w', encoding=OUTPUT_ENCODING, newline='\n') as relationship_sink:
            counts = catalogue.export_to(object_sink, relationship_sink)
    except FileNotFoundError as e:
        log.error(f"Directory not found when exporting to {object_path}: {e}")
        raise DataSaveError(f"Directory not found: {object_path.parent}")
    except PermissionError as e:
        log.error(f"Permission denied when exporting to {object_path}: {e}")
        raise DataSaveError(f"Permission denied: {object_path}")
    except OSError as e:
        log.error(f"OS error when exporting to {object_path}: {e}")
        raise DataSaveError(f"OS error (disk space, path length, etc.): {e}")

    log.info(f"Exported {counts[0]} objects to {object_path} and "
             f"{counts[1]} relationships to {relationship_path}")
    return counts


def save_catalogue_table(catalogue: Catalogue, filepath: PathLike) -> None:
    """Save one row per object as CSV.

    Raises:
        DataSaveError: If the file cannot be written.
    """
    if len(catalogue) == 0:
        log.warning("No objects to save.")
        return

    try:
        df = catalogue.to_dataframe()
        df.to_csv(filepath, index=False, encoding=OUTPUT_ENCODING)
        log.info(f"Catalogue table saved to {filepath} ({len(df)} rows)")
    except FileNotFoundError as e:
        log.error(f"Directory not found when saving to {filepath}: {e}")
        raise DataSaveError(f"Directory not found: {filepath}")
    except PermissionError as e:
        log.error(f"Permission denied when saving to {filepath}: {e}")
        raise DataSaveError(f"Permission denied: {filepath}")
    except OSError as e:
        log.error(f"OS error when saving to {filepath}: {e}")
        raise DataSaveError(f"OS error (disk space, path length, etc.): {e}")
