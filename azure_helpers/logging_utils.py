"""
Logging utilities for the Azure helpers.
"""

import logging

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("azure_helpers")

# Color codes for terminal output
RED = "\033[0;31m"
GRN = "\033[0;32m"
RST = "\033[0m"

AZURE_LOGGERS = (
    "azure",
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
)


def setup_logging(verbose):
    """Configure logging based on verbosity level"""
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    # Azure SDK loggers are chatty, only surface them when verbose
    sdk_level = logging.DEBUG if verbose else logging.WARNING
    for name in AZURE_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)
