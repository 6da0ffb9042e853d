"""Process exit codes."""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
# Also what click uses for usage errors such as a missing required argument
EXIT_MISSING_ARGUMENTS = 2
EXIT_UNKNOWN_COMMAND = 3
EXIT_NO_COMMAND = 5
