"""
Global constants for the HomeCareAPI.

Closed value sets shared by the models, schemas and services, plus the
seasonal checklist templates.
"""

import enum


class Role(str, enum.Enum):
    """Role a user holds on a property, ordered owner > admin > edit > view."""

    OWNER = "owner"
    ADMIN = "admin"
    EDIT = "edit"
    VIEW = "view"


ROLE_RANKS = {
    Role.VIEW: 1,
    Role.EDIT: 2,
    Role.ADMIN: 3,
    Role.OWNER: 4,
}

GRANTABLE_ROLES = (Role.ADMIN, Role.EDIT, Role.VIEW)
"""tuple[Role]: Roles that may be handed out by sharing; owner never is."""


def at_least(role, minimum: Role) -> bool:
    """
    Check a role against a minimum privilege level.

    Args:
        role (Role | str | None): The role held, `None` meaning no access.
        minimum (Role): The lowest acceptable role.

    Returns:
        bool: True if `role` is `minimum` or more privileged.
    """
    if role is None:
        return False
    return ROLE_RANKS[Role(role)] >= ROLE_RANKS[minimum]


class Frequency(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"
    ANNUAL = "annual"


FREQUENCIES = [f.value for f in Frequency]

PRIORITIES = ["High", "Medium", "Low"]
DEFAULT_PRIORITY = "Medium"
DEFAULT_CATEGORY = "General"

TASK_STATUSES = ["pending", "completed"]

LOG_CATEGORIES = [
    "Plumbing",
    "Electrical",
    "HVAC",
    "Roofing",
    "Landscaping",
    "General",
    "Appliance",
]

PROPERTY_TYPES = [
    "Single Family Home",
    "Condo",
    "Townhouse",
    "Multi-Family",
    "Commercial",
]

HEATING_TYPES = [
    "District Heating",
    "Electric",
    "Heat Pump",
    "Oil",
    "Gas",
    "Wood",
    "Solar",
    "None",
]

SEASONS = ["Spring", "Summer", "Fall", "Winter"]

SEASONAL_TEMPLATES = {
    "Spring": [
        "Inspect and repair roof",
        "Clean gutters and downspouts",
        "Check exterior caulking and sealant",
        "Inspect deck or patio for damage",
        "Check HVAC system before summer",
        "Service air conditioning unit",
        "Check basement/crawlspace for water damage",
        "Inspect windows for leaks",
    ],
    "Summer": [
        "Power wash exterior surfaces",
        "Stain or seal deck/patio",
        "Check exterior paint for peeling",
        "Inspect landscaping drainage",
        "Clean and inspect septic system (if applicable)",
        "Check and repair fencing",
        "Inspect foundation for cracks",
        "Service well pump (if applicable)",
    ],
    "Fall": [
        "Clean leaves from gutters",
        "Inspect chimney and have it swept",
        "Service heating system before winter",
        "Weatherize windows and doors",
        "Drain and store garden hoses",
        "Inspect exterior grading and drainage",
        "Check attic for leaks and ventilation",
        "Trim tree branches near roof and utilities",
    ],
    "Winter": [
        "Monitor ice dams on roof",
        "Check for gaps around utilities entering home",
        "Inspect basement for water seepage",
        "Check weatherstripping on doors",
        "Monitor heating system performance",
        "Check for signs of pests",
        "Inspect pipes for freezing risks",
        "Check attic insulation adequacy",
    ],
}
"""dict[str, list[str]]: Default checklist item titles per season."""
