"""
Hoststat - host load, CPU, uptime and user-count sampler.
"""

from .const import APP_VERSION

__version__ = APP_VERSION
