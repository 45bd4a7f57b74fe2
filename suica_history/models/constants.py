"""Constants used throughout Suica History."""

# Service codes
HISTORY_SERVICE_CODE = 0x090F

# Block processing
BLOCK_SIZE = 16
MAX_BLOCK_INDEX = 0xFFFF
DEFAULT_MAX_BLOCKS = 64

# FeliCa command codes
READ_WITHOUT_ENCRYPTION_COMMAND = 0x06
IDM_LENGTH = 8

# Status flags
SUCCESS_STATUS = (0x00, 0x00)
TERMINAL_STATUS = (0x01, 0xA8)

# Transaction action codes
ACTION_NAMES = {
    25: "New card",
    22: "Train",
    200: "Vending Machine",
}

# Reader defaults
DEFAULT_DEVICE = "usb"
FELICA_TARGETS = ["212F", "424F"]
DEFAULT_DATABASE = "history.db"
DEFAULT_WATCH_INTERVAL = 1.0
