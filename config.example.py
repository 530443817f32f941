# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "THALOS_APP_NAME": "App display name (default: Thalos Prime).",
    "THALOS_LOG_LEVEL": "Console logging level (default: INFO).",
    "THALOS_DATA_DIR": "Local data directory, holds thalos.log (default: .local/thalos).",
    # HTTP
    "THALOS_HTTP_HOST": "Bind host for --serve (default: 0.0.0.0).",
    "THALOS_HTTP_PORT": "Port for --serve; PORT is accepted too (default: 8000).",
    # Execution
    "THALOS_WORK_DELAY_SECONDS": "Simulated work per task, in seconds (default: 0).",
    "THALOS_WAIT_TIMEOUT_SECONDS": "How long the CLI waits for a submitted task (default: 30).",
    # Presentation
    "THALOS_RECENT_TASKS_LIMIT": "Tasks shown by /tasks without an argument (default: 10).",
}
