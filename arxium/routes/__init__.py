# Import all routes for export
from . import query_routes
from . import history_routes
from . import setup_routes
from . import config_routes

# Export route modules
__all__ = [
    'query_routes',
    'history_routes',
    'setup_routes',
    'config_routes'
]
