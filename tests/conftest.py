"""
Shared test setup.

Auth settings are read once at import, so the signing secret has to be in
the environment before any ``src`` module is imported.
"""

import os

os.environ.setdefault("SUPABASE_JWT_SECRET", "vibe-test-jwt-secret-at-least-32-characters")
