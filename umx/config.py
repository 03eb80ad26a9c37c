"""
Runtime settings.

Every value can be overridden through an environment variable.
"""

import os

# Logging level name for the command line tools
LOG_LEVEL = os.environ.get("UMX_LOG_LEVEL", "WARNING")

# Default extraction target
OUTPUT_DIR = os.environ.get("UMX_OUTPUT_DIR", os.path.join(os.getcwd(), "output"))

# Export classes whose objects carry an embedded file
PAYLOAD_CLASSES = [
    c.strip()
    for c in os.environ.get("UMX_PAYLOAD_CLASSES", "Music,Sound").split(",")
    if c.strip()
]
