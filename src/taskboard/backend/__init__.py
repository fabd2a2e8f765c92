"""
Backends implementing the ports.

- supabase_auth.py / supabase_tables.py: hosted Supabase over httpx
- offline.py: in-memory auth + table (demo mode, tests)
"""
