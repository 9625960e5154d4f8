"""Global constants for siteaudit.

Centralizes the scheduling defaults used throughout the codebase,
making them discoverable, consistent, and easy to modify.
"""

# =============================================================================
# Phases
# =============================================================================

MIN_PHASE = 1
"""Lowest phase number a test may be assigned to."""

MAX_PHASE = 3
"""Highest phase number a test may be assigned to."""

# =============================================================================
# Concurrency
# =============================================================================

DEFAULT_BASELINE_CONCURRENCY = 4
"""Page slots recommended for a phase before resource-intensive tests reduce it."""

MIN_CONCURRENCY = 1
"""Floor for every recommended concurrency value."""

# =============================================================================
# Duration Estimation (seconds)
# =============================================================================

DEFAULT_SESSION_TEST_SECONDS = 10.0
"""Estimated cost of a session-scope test (runs once per audit)."""

DEFAULT_PAGE_TEST_SECONDS = 5.0
"""Estimated cost of a page-scope test on a single page."""

DEFAULT_ESTIMATED_PAGES = 10
"""Pages assumed for a crawl when the caller does not supply a page count."""

# =============================================================================
# Required Tests
# =============================================================================

CRAWL_TEST_ID = "site-crawling"
"""Test implied by a crawl run; its dependents are satisfied when crawling."""

SCREENSHOT_TEST_ID = "screenshots"
"""Page test that runs once per configured viewport."""

# =============================================================================
# Environment Variables
# =============================================================================

PROJECT_CONFIG_ENV_VAR = "SITEAUDIT_PROJECT_CONFIG"
"""Environment variable pointing at a project config that replaces the packaged one."""
