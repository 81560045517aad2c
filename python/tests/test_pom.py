"""Tests for maven-metadata.xml / POM deserialization and license classification."""

import pytest
from ossinfo.errors import DescriptorParseError
from ossinfo.licenses import Spdx, classify_license, classify_licenses
from ossinfo.pom import parse_maven_metadata, parse_pom

CORE_KTX_METADATA = """<?xml version='1.0' encoding='UTF-8'?>
<metadata>
  <groupId>androidx.core</groupId>
  <artifactId>core-ktx</artifactId>
  <versioning>
    <latest>1.12.0</latest>
    <release>1.12.0</release>
    <versions>
      <version>1.9.0</version>
      <version>1.10.0</version>
      <version>1.12.0</version>
    </versions>
    <lastUpdated>20230906171128</lastUpdated>
  </versioning>
</metadata>
"""

CORE_KTX_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 https://maven.apache.org/xsd/maven-4.0.0.xsd">
  <modelVersion>4.0.0</modelVersion>
  <groupId>androidx.core</groupId>
  <artifactId>core-ktx</artifactId>
  <version>1.12.0</version>
  <packaging>aar</packaging>
  <name>Core Kotlin Extensions</name>
  <description>Kotlin extensions for 'core' artifact</description>
  <url>https://developer.android.com/jetpack/androidx/releases/core#1.12.0</url>
  <inceptionYear>2018</inceptionYear>
  <licenses>
    <license>
      <name>The Apache Software License, Version 2.0</name>
      <url>http://www.apache.org/licenses/LICENSE-2.0.txt</url>
      <distribution>repo</distribution>
    </license>
  </licenses>
</project>
"""

OKHTTP_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>com.squareup.okhttp3</groupId>
    <artifactId>parent</artifactId>
    <version>4.9.3</version>
    <name>Parent Name</name>
  </parent>
  <artifactId>okhttp</artifactId>
  <name>okhttp</name>
  <licenses>
    <license>
      <name>The Apache Software License, Version 2.0</name>
    </license>
    <license>
      <name>Eclipse Public License 1.0</name>
    </license>
  </licenses>
</project>
"""


class TestParseMavenMetadata:
    """Tests for parse_maven_metadata."""

    def test_core_ktx(self):
        """Test a metadata document with release and latest."""
        metadata = parse_maven_metadata(CORE_KTX_METADATA)

        assert metadata.group_id == "androidx.core"
        assert metadata.artifact_id == "core-ktx"
        assert metadata.version is None
        assert metadata.latest_version == "1.12.0"
        assert metadata.release_version == "1.12.0"
        assert metadata.preferred_version == "1.12.0"

    def test_falls_back_to_version(self):
        """Test the version preference order without versioning tags."""
        metadata = parse_maven_metadata(
            "<metadata><groupId>g</groupId><artifactId>a</artifactId><version>0.9</version></metadata>")

        assert metadata.latest_version is None
        assert metadata.release_version is None
        assert metadata.preferred_version == "0.9"

    def test_latest_when_no_release(self):
        """Test that latest is used when release is missing."""
        metadata = parse_maven_metadata(
            "<metadata><groupId>g</groupId><artifactId>a</artifactId>"
            "<versioning><latest>2.0-SNAPSHOT</latest></versioning></metadata>")

        assert metadata.preferred_version == "2.0-SNAPSHOT"

    def test_missing_artifact_id(self):
        """Test that required elements are enforced."""
        with pytest.raises(DescriptorParseError):
            parse_maven_metadata("<metadata><groupId>g</groupId></metadata>")

    def test_not_xml(self):
        """Test that an HTML error page is rejected."""
        with pytest.raises(DescriptorParseError):
            parse_maven_metadata("<html><body>Not Found")


class TestParsePom:
    """Tests for parse_pom."""

    def test_namespaced_pom(self):
        """Test a POM with the Maven namespace."""
        pom = parse_pom(CORE_KTX_POM)

        assert pom.group_id == "androidx.core"
        assert pom.artifact_id == "core-ktx"
        assert pom.version == "1.12.0"
        assert pom.packaging == "aar"
        assert pom.name == "Core Kotlin Extensions"
        assert pom.description == "Kotlin extensions for 'core' artifact"
        assert pom.licenses == ["Apache-2.0"]

    def test_parent_values_are_not_used(self):
        """Test that <parent> children do not leak into the project."""
        pom = parse_pom(OKHTTP_POM)

        assert pom.group_id is None
        assert pom.version is None
        assert pom.artifact_id == "okhttp"
        assert pom.name == "okhttp"
        assert pom.packaging is None
        assert pom.licenses == ["Apache-2.0", "Eclipse Public License 1.0"]

    def test_missing_artifact_id(self):
        """Test that artifactId is required."""
        with pytest.raises(DescriptorParseError):
            parse_pom("<project><groupId>g</groupId></project>")


class TestClassifyLicense:
    """Tests for license name classification."""

    @pytest.mark.parametrize("name,expected", [
        ("The Apache Software License, Version 2.0", "Apache-2.0"),
        ("The Apache License, Version 2.0", "Apache-2.0"),
        ("Apache 2.0", "Apache-2.0"),
        ("Simplified BSD License", "BSD-2-Clause"),
        ("ISC License", "ISC"),
        ("MIT License", "MIT"),
        ("  MIT License ", "MIT"),
        ("GNU General Public License, version 2", "GNU General Public License, version 2"),
    ])
    def test_classify(self, name, expected):
        """Test known and unknown license names."""
        assert classify_license(name) == expected

    def test_classify_licenses_skips_blank(self):
        """Test that blank names are dropped."""
        assert classify_licenses(["MIT License", "", "  "]) == [Spdx.MIT.value]

    def test_spdx_str(self):
        """Test the string form of Spdx members."""
        assert str(Spdx.BSD_3_CLAUSE) == "BSD-3-Clause"
