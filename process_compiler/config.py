"""
Configuration settings for the process map compiler.
"""

# Per-step timeout in milliseconds written into each step's test config.
# The workflow-level timeout is this value multiplied by the step count.
DEFAULT_STEP_TIMEOUT_MS = 30000

# Number of retries the test harness may attempt for a failing step
DEFAULT_RETRY_COUNT = 3

# Run mode the test harness starts in ("mock", "schema_validation", "production_readonly")
DEFAULT_RUN_MODE = "mock"

# Condition attached to the default sequential connections
DEFAULT_CONNECTION_CONDITION = "success"

# Maximum number of title characters kept in a step id slug
SLUG_MAX_LENGTH = 30

# Version stamped on every compiled workflow definition
WORKFLOW_VERSION = 1

# Input guard for compile_process: reject descriptions or diagrams longer
# than this many lines. None = no limit.
MAX_INPUT_LINES = 5000
