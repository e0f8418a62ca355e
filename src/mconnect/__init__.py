"""
m-connect data-access layer.

Credential resolution, the authenticated request client, typed domain
services and category image resolution for the m-connect marketplace.
"""

from .container import ServiceContainer, build_services, configure_logging

__version__ = "0.1.0"

__all__ = ["ServiceContainer", "build_services", "configure_logging", "__version__"]
