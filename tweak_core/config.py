# Drift search: characters checked on each side of the recorded column
SEARCH_RADIUS = 5

# Limits on a single tweak request
MAX_PARAMETERS = 20
MAX_EXPECTED_TEXT_LENGTH = 50

# Delay before a slider value is written (seconds)
DEFAULT_DEBOUNCE_SECONDS = 0.15
