# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit session files: tokens are stored under the data dir, which is gitignored.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKMASTER_APP_NAME": "App display name (default: TaskMaster).",
    "TASKMASTER_LOG_LEVEL": "Logging level (default: INFO).",
    # Connectors
    "TASKMASTER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Remote API
    "TASKMASTER_API_BASE_URL": "API base URL (default: http://localhost:5000/api).",
    "TASKMASTER_REQUEST_TIMEOUT_SECONDS": "Transport timeout per request (default: 10).",
    # Paths (gitignored)
    "TASKMASTER_DATA_DIR": "Local data directory (default: .local/taskmaster).",
    "TASKMASTER_SESSION_PATH": "Token file (default: <data_dir>/session.json).",
    # Dashboard
    "TASKMASTER_SEARCH_DEBOUNCE_SECONDS": "Quiet period before a search is sent (default: 0.5).",
    "TASKMASTER_PAGE_SIZE": "Tasks per page (default: server default).",
}
