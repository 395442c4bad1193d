class MetaError(Exception):
    """Base class for everything this package raises on purpose."""


class FetchError(MetaError):
    """An upstream collaborator (maven, manifest, version json) could not be read."""


class UpstreamTimeoutError(FetchError):
    pass


class AggregationError(MetaError):
    """The version database could not be generated."""


class InconsistentDataError(AggregationError):
    """A listing that game versions are derived from came back empty."""


class DatabaseNotReadyError(MetaError):
    pass


class NotFoundError(MetaError):
    """The requested version is not known. Request layers map this to a 404."""


class UnknownGameVersionError(NotFoundError):
    pass


class UnknownLoaderVersionError(NotFoundError):
    pass


class MalformedUpstreamMetadataError(MetaError):
    pass


class PackagingError(MetaError):
    pass
