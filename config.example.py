# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real keys. Use .env (local, gitignored).

Without TASKBOARD_SUPABASE_URL / TASKBOARD_SUPABASE_ANON_KEY the app runs against
an in-memory offline backend (nothing is persisted).
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKBOARD_DATA_DIR": "Local data directory for taskboard.log (default: .local/taskboard).",
    # Supabase
    "TASKBOARD_SUPABASE_URL": "Project URL, e.g. https://<ref>.supabase.co (fallback: SUPABASE_URL).",
    "TASKBOARD_SUPABASE_ANON_KEY": "Project anon (public) key (fallback: SUPABASE_ANON_KEY).",
    "TASKBOARD_TASKS_TABLE": "Table name (default: tasks).",
    # HTTP
    "TASKBOARD_HTTP_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "TASKBOARD_HTTP_READ_TIMEOUT_SECONDS": "Read timeout (default: 20).",
    # Switches
    "TASKBOARD_OFFLINE": "Force the in-memory offline backend (true/false).",
}
