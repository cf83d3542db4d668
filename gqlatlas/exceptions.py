"""
Custom exceptions for GQLAtlas
"""


class GQLAtlasError(Exception):
    """Base exception for all GQLAtlas errors"""
    pass


class NotLoadedError(GQLAtlasError):
    """Schema query issued before a schema was loaded"""

    def __init__(self, message: str = "No schema loaded. Call load_schema() first."):
        super().__init__(message)


class ParseError(GQLAtlasError):
    """Input could not be parsed into structured data"""

    def __init__(self, message: str, cause: Exception = None):
        self.cause = cause
        super().__init__(message + (f": {cause}" if cause else ""))


class SchemaParseError(ParseError):
    """Schema SDL failed to parse or validate"""
    pass


class PayloadParseError(ParseError):
    """Enrichment response carried no usable JSON payload"""
    pass


class FileAccessError(GQLAtlasError):
    """Resolver source path missing or unreadable"""

    def __init__(self, path: str, message: str = "path does not exist"):
        self.path = path
        super().__init__(f"{path}: {message}")


class EnrichmentUnavailable(GQLAtlasError):
    """External enrichment call failed or returned unusable data"""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")
