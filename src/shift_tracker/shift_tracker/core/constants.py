"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

# Sentinel used by the workplace selector for a free-text workplace.
CUSTOM_WORKPLACE = "Otro"

# Filter value meaning "no filter" in the days-off admin view.
ALL = "todos"

PAYSLIP_BUCKET = "boletas-pago"
PAYSLIP_EXTENSIONS = frozenset({"pdf", "png", "jpg", "jpeg"})

EVENT_COLOR_COMPLETED = "#28a745"
EVENT_COLOR_IN_PROGRESS = "#ffc107"
