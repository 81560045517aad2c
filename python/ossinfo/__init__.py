"""ossinfo - collect OSS information for the dependencies of a Gradle build."""

__version__ = "0.1.0"
