"""
Utility modules for the data-access layer
"""
from .config_loader import ClientConfig, load_client_config

__all__ = [
    'ClientConfig',
    'load_client_config',
]
