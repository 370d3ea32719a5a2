"""
atlas_intake.auth

Admin authentication/authorization package.

Responsibilities:
- Identity claim extraction (unverified, behind a trusted proxy) and optional
  JWT verification.
- The per-request authorization decision (`AuthGate`).
- FastAPI dependencies mapping decisions to 401/403.
"""

# Package marker.
