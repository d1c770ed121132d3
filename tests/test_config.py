# test_config.py
"""Test module for configuration constants."""

from astracatalogue import config


class TestAttributeRanges:
    """Test physical attribute validation ranges."""

    def test_redshift_range(self):
        assert config.MIN_REDSHIFT == -1.0
        assert config.MAX_REDSHIFT > config.MIN_REDSHIFT

    def test_non_negative_quantities(self):
        assert config.MIN_DISTANCE_PC == 0.0
        assert config.MIN_MASS_SOLAR == 0.0
        assert config.MIN_ROTATIONAL_VELOCITY == 0.0
        assert config.MAX_DISTANCE_PC > 0
        assert config.MAX_MASS_SOLAR > 0

    def test_stellar_mass_fraction_range(self):
        assert config.MIN_STELLAR_MASS_FRACTION == 0.0
        assert config.MAX_STELLAR_MASS_FRACTION == 0.1

    def test_spectral_digit_range(self):
        assert (config.MIN_SPECTRAL_DIGIT, config.MAX_SPECTRAL_DIGIT) == (0, 9)

    def test_orbit_ranges(self):
        assert config.MIN_ORBIT_TILT_DEG == -180.0
        assert config.MAX_ORBIT_TILT_DEG == 180.0
        assert config.MIN_ORBIT_DISTANCE == 0.0
        assert config.MIN_ORBIT_ECCENTRICITY == 0.0


class TestDefaultOrbit:
    """Test the default orbit used for bindings without parameters."""

    def test_default_orbit_values(self):
        assert config.DEFAULT_ORBIT_DISTANCE == 1.0
        assert config.DEFAULT_ORBIT_TILT_DEG == 0.0
        assert config.DEFAULT_ORBIT_ECCENTRICITY == 1.0

    def test_default_orbit_within_ranges(self):
        assert config.DEFAULT_ORBIT_DISTANCE >= config.MIN_ORBIT_DISTANCE
        assert config.MIN_ORBIT_TILT_DEG <= config.DEFAULT_ORBIT_TILT_DEG <= config.MAX_ORBIT_TILT_DEG
        assert config.DEFAULT_ORBIT_ECCENTRICITY >= config.MIN_ORBIT_ECCENTRICITY


class TestRecordFormat:
    """Test record format and file naming constants."""

    def test_field_counts(self):
        assert config.RECORD_FIELD_DELIMITER == ':'
        assert config.BASE_RECORD_FIELD_COUNT == 6
        assert config.GALAXY_EXTRA_FIELD_COUNT == 2
        assert config.STELLAR_EXTRA_FIELD_COUNT == 5
        assert config.RELATIONSHIP_FIELD_COUNT == 5

    def test_file_naming(self):
        assert config.OBJECT_FILE_EXTENSION == '.dat'
        assert config.RELATIONSHIP_FILE_SUFFIX == '_relationships'

    def test_conflict_policies(self):
        assert config.DEFAULT_EXPORT_CONFLICT_POLICY in config.EXPORT_CONFLICT_POLICIES
        assert set(config.EXPORT_CONFLICT_POLICIES) == {'error', 'overwrite', 'timestamp'}

    def test_encoding_fallback(self):
        assert config.ENCODING_FALLBACK_ORDER[0] == 'utf-8'
        assert 'latin-1' in config.ENCODING_FALLBACK_ORDER

    def test_legacy_tokens_map_to_current(self):
        assert config.LEGACY_KIND_TOKENS['Dwarf Planet'] == 'DwarfPlanet'


class TestLoggingConfiguration:
    """Test logging defaults."""

    def test_log_level(self):
        assert config.DEFAULT_LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR')

    def test_log_format(self):
        assert '%(levelname)s' in config.DEFAULT_LOG_FORMAT
        assert '%(message)s' in config.DEFAULT_LOG_FORMAT
