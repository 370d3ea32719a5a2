"""
atlas_intake.api

API package for the Atlas intake service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and HTML rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: form parsing + auth + delegation to services.
