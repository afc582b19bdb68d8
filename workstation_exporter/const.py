"""
Application constants and metadata.
"""

# Application info
APP_NAME = "Workstation Exporter"
APP_VERSION = "0.1.0"

# Default values
DEFAULT_LISTEN = "0.0.0.0"
DEFAULT_PORT = 9011
DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_CONFIG_PATH = "/etc/workstation-exporter/config.conf"
