__title__ = 'transitrouting'
__version__ = '1.0.0'
__license__ = 'MIT'

__all__ = ['catalogue', 'graph', 'routing', 'rendering', 'readers', 'core_route_service', 'config', 'logger', 'exceptions', 'api', 'cli']

# Set default logging handler to avoid "No handler found" warnings.
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
