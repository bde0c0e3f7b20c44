"""Constants used throughout the stackloom library.

This module defines default client settings, collection paths, and the
literals or enumerations used for API parameters.
"""

from enum import Enum

STACKLOOM_VERSION: str = "0.1.0"
DEFAULT_USER_AGENT: str = f"stackloom/{STACKLOOM_VERSION}"

# --- Collection paths, relative to each service endpoint --- #
DATABASES_PATH = "instances/{instance_id}/databases"
VIPS_PATH = "lb/vips"

# --- Trove limits --- #
MAX_DATABASE_NAME_LENGTH: int = 64

# --- Administrative state of load balancer resources --- #
UP: bool = True
DOWN: bool = False


class SortDir(Enum):
    ASC = "asc"
    DESC = "desc"
