"""
Application constants and metadata.
"""

# Application info
APP_NAME = "hostpoll"
APP_VERSION = "0.1.0"

# HTTP exporter
DEFAULT_PORT = 63107
DEFAULT_BIND_ADDRESS = "0.0.0.0"
DEFAULT_METRIC_PREFIX = "envirobly"

# Collection intervals (seconds)
DEFAULT_UPDATE_INTERVAL = 10.0
DEFAULT_SYSTEM_INTERVAL = 5.0
DEFAULT_NETWORK_INTERVAL = 5.0
DEFAULT_FILESYSTEM_INTERVAL = 10.0
DEFAULT_ZPOOL_INTERVAL = 10.0

# Mount points that are never reported as filesystems
DEFAULT_EXCLUDED_MOUNTPOINTS = (
    "/boot/efi",
    "/var/envirobly/zpools",
    "/var/lib/docker/volumes",
)

# Physical NIC naming convention
DEFAULT_INTERFACE_PREFIXES = ("ens",)

# Pool capacity listing
DEFAULT_ZPOOL_COMMAND = ("zpool", "list", "-H", "-o", "name,cap")
DEFAULT_ZPOOL_TIMEOUT = 5.0

# Seconds to wait for in-flight collection cycles on shutdown
SHUTDOWN_GRACE_PERIOD = 10.0
