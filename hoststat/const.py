"""
Application constants and metadata.
"""

# Application info
APP_NAME = "Hoststat"
APP_VERSION = "0.1.0"

# Default values
DEFAULT_INTERVAL = 15.0
DEFAULT_QUEUE_SIZE = 1000
DEFAULT_CONFIG_PATH = "/etc/hoststat/config.conf"
DEFAULT_LOG_FILE = "/var/log/hoststat/hoststat.log"

# Separator between input name and field name in emitted metric names
METRIC_SEPARATOR = "_"
