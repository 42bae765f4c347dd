"""Process exit codes returned by the catalogpager CLI."""

SUCCESS = 0
USER_ERROR = 2
VALIDATION_ERROR = 3
EXTERNAL_FAILURE = 4
INTERNAL_BUG = 5
