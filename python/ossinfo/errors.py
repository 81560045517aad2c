"""Error types raised by ossinfo."""


class OssInfoError(Exception):
    """Base class for all ossinfo errors."""


class ReportError(OssInfoError):
    """The dependency report could not be turned into a coordinate list."""


class UnexpectedIndentError(ReportError):
    """Tree-art indentation is not a multiple of the indent width, or starts below the root."""


class MissingConfigurationError(ReportError):
    """The report contains the trees of more than one configuration."""


class MalformedCoordinateError(ReportError, ValueError):
    """A dependency token does not have a recognized shape."""

    def __init__(self, message: str, token: str = None):
        super().__init__(message)
        self.token = token


class ReportReadError(ReportError):
    """The underlying line source failed."""


class DescriptorParseError(OssInfoError):
    """A maven-metadata.xml or POM document could not be deserialized."""


class ArtifactFetchError(OssInfoError):
    """Artifact information could not be retrieved from a repository."""
