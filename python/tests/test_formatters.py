"""Tests for output formatters."""

import csv
import io
import json

from ossinfo import __version__
from ossinfo.formatters import CSV_HEADER, OutputFormatter
from ossinfo.models import ArtifactInfo
from ossinfo.parsers import DependencyReportParser


def _info(coordinate, **kwargs) -> ArtifactInfo:
    return ArtifactInfo(coordinate=coordinate, **kwargs)


INFOS = {
    "androidx.core:core-ktx:1.9.0": _info(
        "androidx.core:core-ktx:1.9.0",
        version="1.12.0",
        latest_version="1.12.0",
        release_version="1.12.0",
        packaging="aar",
        name="Core Kotlin Extensions",
        description="Kotlin extensions for 'core' artifact",
        licenses=["Apache-2.0"],
    ),
    "com.example:dual:2.0": _info(
        "com.example:dual:2.0",
        version="2.1",
        name="Dual, licensed",
        licenses=["MIT", "Eclipse Public License 1.0"],
    ),
}


class TestFormatAsList:
    """Tests for format_as_list."""

    def test_one_per_line(self):
        """Test newline separated output."""
        assert OutputFormatter.format_as_list(["g:a:1.0", "g:b:2.0"]) == "g:a:1.0\ng:b:2.0\n"

    def test_empty(self):
        """Test that nothing is printed for no dependencies."""
        assert OutputFormatter.format_as_list([]) == ""


class TestFormatAsCsv:
    """Tests for format_as_csv."""

    def test_rows(self):
        """Test header, field mapping and skipped lookups."""
        dependencies = ["androidx.core:core-ktx:1.9.0", "com.example:dual:2.0", "g:failed:1.0"]

        output = OutputFormatter.format_as_csv(dependencies, INFOS)
        rows = list(csv.reader(io.StringIO(output)))

        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "androidx.core:core-ktx",
            "1.9.0",
            "1.12.0",
            "aar",
            "Core Kotlin Extensions",
            "Kotlin extensions for 'core' artifact",
            "Apache-2.0",
        ]
        assert rows[2] == ["com.example:dual", "2.0", "2.1", "", "Dual, licensed", "", "MIT/Eclipse Public License 1.0"]
        assert len(rows) == 3

    def test_versionless_dependency(self):
        """Test that a coordinate without version has an empty input version."""
        infos = {"g:a": _info("g:a", version="3.0")}

        rows = list(csv.reader(io.StringIO(OutputFormatter.format_as_csv(["g:a"], infos))))

        assert rows[1][:3] == ["g:a", "", "3.0"]

    def test_header_only(self):
        """Test output with no information at all."""
        assert OutputFormatter.format_as_csv([], {}) == ",".join(CSV_HEADER) + "\n"


class TestFormatAsSbom:
    """Tests for format_as_sbom."""

    def test_components(self):
        """Test the CycloneDX document produced for looked-up dependencies."""
        dependencies = ["androidx.core:core-ktx:1.9.0", "g:failed:1.0"]

        sbom = json.loads(OutputFormatter.format_as_sbom(dependencies, INFOS))

        assert sbom["bomFormat"] == "CycloneDX"
        assert sbom["specVersion"] == "1.6"

        components = {c["purl"]: c for c in sbom["components"]}
        assert set(components) == {
            "pkg:maven/androidx.core/core-ktx@1.9.0",
            "pkg:maven/g/failed@1.0",
        }

        core_ktx = components["pkg:maven/androidx.core/core-ktx@1.9.0"]
        assert core_ktx["group"] == "androidx.core"
        assert core_ktx["name"] == "core-ktx"
        assert core_ktx["version"] == "1.9.0"
        assert core_ktx["description"] == "Kotlin extensions for 'core' artifact"
        assert core_ktx["licenses"] == [{"license": {"id": "Apache-2.0"}}]

        assert "licenses" not in components["pkg:maven/g/failed@1.0"]

    def test_tool_metadata(self):
        """Test that ossinfo is recorded as the producing tool."""
        sbom = json.loads(OutputFormatter.format_as_sbom([], {}))

        tools = sbom["metadata"]["tools"]["components"]
        assert tools[0]["name"] == "ossinfo"
        assert tools[0]["version"] == __version__

    def test_entries_without_artifact_are_skipped(self):
        """Test that flat-list lines naming only a group do not abort the SBOM."""
        dependencies = DependencyReportParser.parse_prettied_dependencies(
            ["androidx.appcompat", "androidx.core:core-ktx:1.9.0"]
        )

        sbom = json.loads(OutputFormatter.format_as_sbom(dependencies, INFOS))

        assert [c["purl"] for c in sbom["components"]] == ["pkg:maven/androidx.core/core-ktx@1.9.0"]
