"""
Configuration constants for AstraCatalogue.

This module centralizes all configuration parameters used throughout the application,
making them easily configurable and maintainable.
"""

# Physical Validation Ranges
MIN_REDSHIFT = -1.0
MAX_REDSHIFT = 14.0
MIN_DISTANCE_PC = 0.0
MAX_DISTANCE_PC = 1.0e10      # 10 Gpc
MIN_MASS_SOLAR = 0.0
MAX_MASS_SOLAR = 1.0e18
MIN_ROTATIONAL_VELOCITY = 0.0
MAX_ROTATIONAL_VELOCITY = 1.0e4  # rad/s

# Galaxy-specific ranges
MIN_STELLAR_MASS_FRACTION = 0.0
MAX_STELLAR_MASS_FRACTION = 0.1

# Stellar classification ranges
MIN_SPECTRAL_DIGIT = 0
MAX_SPECTRAL_DIGIT = 9

# Orbital parameter ranges
MIN_ORBIT_DISTANCE = 0.0
MIN_ORBIT_TILT_DEG = -180.0
MAX_ORBIT_TILT_DEG = 180.0
MIN_ORBIT_ECCENTRICITY = 0.0

# Default orbit used when a satellite is bound without explicit parameters
DEFAULT_ORBIT_DISTANCE = 1.0
DEFAULT_ORBIT_TILT_DEG = 0.0
DEFAULT_ORBIT_ECCENTRICITY = 1.0

# === Record Format Configuration ===
RECORD_FIELD_DELIMITER = ':'
BASE_RECORD_FIELD_COUNT = 6       # kind, name, redshift, distance, mass, rotational velocity
GALAXY_EXTRA_FIELD_COUNT = 2      # stellar mass fraction, hubble type
STELLAR_EXTRA_FIELD_COUNT = 5     # spectral type, digit, luminosity class, abs mag, app mag
RELATIONSHIP_FIELD_COUNT = 5      # parent, child, distance, tilt, eccentricity

# Legacy kind tokens still accepted on import
LEGACY_KIND_TOKENS = {
    'Dwarf Planet': 'DwarfPlanet',
}

# === IO Module Constants ===
OBJECT_FILE_EXTENSION = '.dat'
RELATIONSHIP_FILE_SUFFIX = '_relationships'
EXPORT_TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'
EXPORT_CONFLICT_POLICIES = ['error', 'overwrite', 'timestamp']
DEFAULT_EXPORT_CONFLICT_POLICY = 'error'

# File encoding fallback order
ENCODING_FALLBACK_ORDER = ['utf-8', 'latin-1']
OUTPUT_ENCODING = 'utf-8'

# Tabular export columns, in display order
CATALOGUE_TABLE_COLUMNS = [
    'name', 'kind', 'redshift', 'distance_pc', 'mass_solar',
    'rotational_velocity', 'parent', 'member_count'
]

# Logging Configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# === Reporting Configuration ===
REPORT_OBJECT_SEPARATOR = "---------------------------"
REPORT_HEADER_SEPARATOR = "----------------------------"
NO_ADDITIONAL_PROPERTIES_TEXT = "No additional properties."
NO_CHILDREN_TEXT = "No child objects."

# === CLI Configuration ===
CLI_DISPLAY_LINE_WIDTH = 90
CLI_NAME_COLUMN_WIDTH = 24
CLI_KIND_COLUMN_WIDTH = 18
CLI_NUMERIC_PRECISION = 4
CLI_VALUE_NOT_AVAILABLE = "N/A"
CLI_COLUMN_SEPARATOR = " | "
