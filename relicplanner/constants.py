"""Solver constants — no mutable state."""

# Every build is exactly this many relics
BUILD_SIZE = 6

# Hard cap on accepted builds per solve call
MAX_BUILDS = 2000

# Max level assumed for any skill the taxonomy and overrides don't mention
DEFAULT_MAX_LEVEL = 6

# Placeholder in secondary skill templates, expanded against the element axis
ELEMENT_PLACEHOLDER = "{Element}"

# Candidate reduction
CANDIDATES_PER_CATEGORY = 15
CANDIDATE_FLOOR = 50
CATEGORY_MATCH_WEIGHT = 2
SKILL_MATCH_WEIGHT = 5

# Relic shape: 1 primary + up to 2 secondaries, each capped per relic
MAX_PRIMARY_LEVEL = 3
MAX_SECONDARY_LEVEL = 3
MAX_SECONDARIES = 2

# Completion message types (worker protocol)
MSG_DONE = "DONE"
MSG_ERROR = "ERROR"
