"""Task manager client: Supabase auth + tasks table, driven from the console."""

__version__ = "0.1.0"
