"""
atlas_intake.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the ORM model, engine/session setup, and the submissions repository.
"""

# Package marker.
