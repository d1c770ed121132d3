# test_utils_io.py
"""Test module for file-level catalogue import and export."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

from astracatalogue.core.catalogue import Catalogue
from astracatalogue.core.kinds import CelestialKind
from astracatalogue.core.objects import make_galaxy, make_star, make_body
from astracatalogue.exceptions import DataLoadError, DataSaveError, DestinationExistsError
from astracatalogue.utils.io import (
    relationship_path_for, read_lines, import_catalogue, resolve_export_paths,
    export_catalogue, save_catalogue_table
)


@pytest.fixture
def solar_system():
    """A small hierarchy: galaxy > star > planet > moon, plus a loose comet."""
    catalogue = Catalogue("solar")
    galaxy = catalogue.add_object(make_galaxy("Milky Way", 0.0, 0.0, 1.5e12, 2.6e-8, 0.04, "SBb"))
    sun = catalogue.add_object(make_star("Sun", 0.0, 0.0, 1.0, 2.9e-6, "G", 2, "V", 4.83, -26.74))
    earth = catalogue.add_object(make_body("TerrestrialPlanet", "Earth", 0.0, 4.85e-6, 3.0e-6, 7.29e-5))
    moon = catalogue.add_object(make_body("Moon", "Moon", 0.0, 4.85e-6, 3.69e-8, 2.66e-6))
    catalogue.add_object(make_body("Comet", "Halley", 0.0, 1.7e-4, 1.1e-16, 0.0))

    galaxy.add_member(sun, 8178.0, 60.2, 0.07)
    sun.add_member(earth, 4.85e-6, 7.155, 0.0167)
    earth.add_member(moon, 1.87e-9, 5.145, 0.0549)
    return catalogue


class TestRelationshipPath:
    """Test companion relationship file naming."""

    def test_dat_file(self):
        assert relationship_path_for("data/stars.dat") == Path("data/stars_relationships.dat")

    def test_without_extension(self):
        assert relationship_path_for("stars") == Path("stars_relationships.dat")


class TestReadLines:
    """Test text reading with encoding fallback."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="File not found"):
            read_lines(tmp_path / "missing.dat")

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / "latin.dat"
        path.write_bytes("Moon:Lún:0.0:0.0:0.01:0.0\n".encode('latin-1'))
        assert read_lines(path) == ["Moon:Lún:0.0:0.0:0.01:0.0"]

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(DataLoadError):
            read_lines(tmp_path)

    def test_splits_on_newline_only(self, tmp_path):
        path = tmp_path / "names.dat"
        path.write_text("Moon:Io\u2028II:0.0\nComet:Ha\x0bley:0.0\r\n", encoding='utf-8')
        assert read_lines(path) == ["Moon:Io\u2028II:0.0", "Comet:Ha\x0bley:0.0"]


class TestRoundTrip:
    """Test exporting and re-importing whole catalogues."""

    def test_round_trip_preserves_objects_and_bindings(self, solar_system, tmp_path):
        object_path = tmp_path / "solar.dat"
        counts = export_catalogue(solar_system, object_path)
        assert counts == (5, 3)
        assert (tmp_path / "solar_relationships.dat").exists()

        restored, report = import_catalogue(object_path)
        assert report.ok
        assert restored.catalogue_name == "solar"
        assert restored.names() == solar_system.names()

        for original in solar_system:
            copy = restored.get_object(original.name)
            assert copy.kind is original.kind
            assert copy.redshift == original.redshift
            assert copy.distance == original.distance
            assert copy.mass == original.mass
            assert copy.rotational_velocity == original.rotational_velocity
            assert copy.properties == original.properties
            assert copy.parent_name == original.parent_name
            assert copy.get_all_members() == original.get_all_members()

    def test_round_trip_independent_of_order(self, solar_system, tmp_path):
        solar_system.sort("Name")
        object_path = tmp_path / "sorted.dat"
        export_catalogue(solar_system, object_path)

        restored, report = import_catalogue(object_path)
        assert report.relationships_loaded == 3
        assert restored.get_object("Moon").root().name == "Milky Way"
        assert restored.names()[0] == "Earth"

    def test_from_files(self, solar_system, tmp_path):
        object_path = tmp_path / "solar.dat"
        export_catalogue(solar_system, object_path)
        restored = Catalogue.from_files(object_path)
        assert len(restored) == 5
        assert restored.get_object("Earth").parent.name == "Sun"

    def test_round_trip_keeps_unicode_separators_in_names(self, tmp_path):
        catalogue = Catalogue("jovian")
        jupiter = catalogue.add_object(make_body("GaseousPlanet", "Jupiter\x85I", 0.0, 2.5e-5, 9.5e-4, 1.76e-4))
        io_moon = catalogue.add_object(make_body("Moon", "Io\u2028II", 0.0, 2.5e-5, 4.5e-8, 4.1e-5))
        catalogue.add_object(make_body("Moon", "Europa\x0c\x1c\u2029", 0.0, 2.5e-5, 2.4e-8, 2.0e-5))
        jupiter.add_member(io_moon, 2.8e-3, 0.05, 0.004)
        object_path = tmp_path / "jovian.dat"
        export_catalogue(catalogue, object_path)

        restored, report = import_catalogue(object_path)
        assert report.ok
        assert restored.names() == ["Jupiter\x85I", "Io\u2028II", "Europa\x0c\x1c\u2029"]
        assert restored.get_object("Io\u2028II").parent.name == "Jupiter\x85I"


class TestImportCatalogue:
    """Test file import behaviour."""

    def test_missing_relationship_file(self, tmp_path):
        object_path = tmp_path / "loose.dat"
        object_path.write_text("Moon:Luna:0.0:0.0:0.012:0.0\nComet:Halley:0.0:0.0:1e-16:0.0\n")

        catalogue, report = import_catalogue(object_path)
        assert len(catalogue) == 2
        assert report.relationships_missing
        assert all(obj.parent is None for obj in catalogue)

    def test_explicit_relationship_path(self, tmp_path):
        object_path = tmp_path / "objects.dat"
        object_path.write_text("Planet:P1:0.0:0.0:1e-05:0.0\nMoon:M1:0.0:0.0:1e-07:0.0\n")
        links = tmp_path / "links.txt"
        links.write_text("P1:M1:0.002:1.5:0.01\n")

        catalogue, report = import_catalogue(object_path, links, catalogue_name="Custom")
        assert catalogue.catalogue_name == "Custom"
        assert report.relationships_loaded == 1
        assert catalogue.get_object("M1").parent_name == "P1"

    def test_malformed_lines_reported(self, tmp_path):
        object_path = tmp_path / "mixed.dat"
        object_path.write_text(
            "Galaxy:G1:0.0:0.0:1e12:0.001:0.05:Sc\n"
            "Nebula:N1:0.0:0.0:1.0:0.0\n"
            "Planet:P1:0.0:0.0:1e-05:0.0012\n"
        )
        (tmp_path / "mixed_relationships.dat").write_text("G1:P1:1.0:4.3:0.43\nG1:P9:1:0:0\n")

        catalogue, report = import_catalogue(object_path)
        assert catalogue.names() == ["G1", "P1"]
        assert report.objects_loaded == 2
        assert report.relationships_loaded == 1
        assert len(report.errors) == 2
        assert catalogue.subselect(CelestialKind.PLANET)[0].parent.name == "G1"

    def test_missing_object_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            import_catalogue(tmp_path / "nothing.dat")


class TestResolveExportPaths:
    """Test destination conflict policies."""

    def test_free_destination(self, tmp_path):
        object_path, relationship_path = resolve_export_paths(tmp_path, "cat")
        assert object_path == tmp_path / "cat.dat"
        assert relationship_path == tmp_path / "cat_relationships.dat"

    def test_error_policy(self, tmp_path):
        (tmp_path / "cat.dat").write_text("")
        with pytest.raises(DestinationExistsError) as exc_info:
            resolve_export_paths(tmp_path, "cat", 'error')
        assert exc_info.value.path == tmp_path / "cat.dat"

    def test_error_policy_checks_relationship_file(self, tmp_path):
        (tmp_path / "cat_relationships.dat").write_text("")
        with pytest.raises(DestinationExistsError):
            resolve_export_paths(tmp_path, "cat")

    def test_overwrite_policy(self, tmp_path):
        (tmp_path / "cat.dat").write_text("")
        object_path, _ = resolve_export_paths(tmp_path, "cat", 'overwrite')
        assert object_path == tmp_path / "cat.dat"

    def test_timestamp_policy(self, tmp_path):
        (tmp_path / "cat.dat").write_text("")
        with patch('astracatalogue.utils.io.datetime') as mock_datetime:
            mock_datetime.now.return_value = datetime(2024, 3, 9, 21, 5, 7)
            object_path, relationship_path = resolve_export_paths(tmp_path, "cat", 'timestamp')
        assert object_path == tmp_path / "cat_20240309_210507.dat"
        assert relationship_path == tmp_path / "cat_20240309_210507_relationships.dat"

    def test_explicit_timestamp(self, tmp_path):
        (tmp_path / "cat.dat").write_text("")
        object_path, _ = resolve_export_paths(tmp_path, "cat", 'timestamp',
                                              timestamp=datetime(2023, 1, 1))
        assert object_path.name == "cat_20230101_000000.dat"

    def test_unknown_policy(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown conflict policy"):
            resolve_export_paths(tmp_path, "cat", 'append')

    def test_empty_name(self, tmp_path):
        with pytest.raises(ValueError):
            resolve_export_paths(tmp_path, "")


class TestExportCatalogue:
    """Test export file contents and failures."""

    def test_export_contents(self, solar_system, tmp_path):
        object_path = tmp_path / "solar.dat"
        relationship_path = tmp_path / "links.dat"
        export_catalogue(solar_system, object_path, relationship_path)

        object_lines = object_path.read_text(encoding='utf-8').splitlines()
        assert object_lines[0] == "Galaxy:Milky Way:0.0:0.0:1500000000000.0:2.6e-08:0.04:SBb"
        assert object_lines[4] == "Comet:Halley:0.0:0.00017:1.1e-16:0.0"
        assert relationship_path.read_text(encoding='utf-8').splitlines() == [
            "Milky Way:Sun:8178.0:60.2:0.07",
            "Sun:Earth:4.85e-06:7.155:0.0167",
            "Earth:Moon:1.87e-09:5.145:0.0549",
        ]

    def test_missing_directory(self, solar_system, tmp_path):
        with pytest.raises(DataSaveError, match="Directory not found"):
            export_catalogue(solar_system, tmp_path / "no" / "such" / "dir.dat")


class TestSaveCatalogueTable:
    """Test CSV table export."""

    def test_save_table(self, solar_system, tmp_path):
        path = tmp_path / "solar.csv"
        save_catalogue_table(solar_system, path)

        df = pd.read_csv(path)
        assert len(df) == 5
        assert list(df['name']) == ["Milky Way", "Sun", "Earth", "Moon", "Halley"]
        assert df.loc[df['name'] == "Earth", 'parent'].iloc[0] == "Sun"

    def test_empty_catalogue_writes_nothing(self, tmp_path):
        path = tmp_path / "empty.csv"
        save_catalogue_table(Catalogue("empty"), path)
        assert not path.exists()

    def test_missing_directory(self, solar_system, tmp_path):
        with pytest.raises(DataSaveError):
            save_catalogue_table(solar_system, tmp_path / "missing" / "table.csv")
