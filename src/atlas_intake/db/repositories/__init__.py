"""
atlas_intake.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; commit/rollback belongs to services.
