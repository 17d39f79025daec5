"""
Custom exceptions for the transit catalogue routing engine
"""

class TransitCatalogueError(Exception):
    """Base exception for the transit catalogue routing engine"""
    pass


class InvalidConfigurationError(TransitCatalogueError):
    """Raised when routing, render or process settings are invalid"""
    pass


class GraphBuildError(TransitCatalogueError):
    """Raised when graph building fails"""
    pass


class RequestFormatError(TransitCatalogueError):
    """Raised when an input document or request is malformed"""
    pass
