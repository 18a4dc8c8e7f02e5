"""Constants shared by the quality gates service and its core."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Service names
QUALITY_GATES_SERVICE_NAME: str = "quality-gates"

# Database settings
DB_BUSY_TIMEOUT_MS: int = 30000

# Pagination of project associations
DEFAULT_PAGE_INDEX: int = 1
DEFAULT_PAGE_SIZE: int = 25
MAX_PAGE_SIZE: int = 100

# Membership filter values accepted by the association search
MEMBERSHIP_SELECTED: str = "selected"
MEMBERSHIP_DESELECTED: str = "deselected"

# Condition operators and differential periods
CONDITION_OPERATORS: list[str] = ["EQ", "NE", "LT", "GT"]
MIN_PERIOD: int = 1
MAX_PERIOD: int = 5

# Quality gate names
MAX_GATE_NAME_LENGTH: int = 100

# Key of the property holding the default quality gate id
DEFAULT_GATE_PROPERTY: str = "qualitygate.default"
