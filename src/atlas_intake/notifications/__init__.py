"""
atlas_intake.notifications

Admin notification package.

Responsibilities:
- Compose the admin-facing email for a new submission.
- Deliver it best-effort through one of several interchangeable providers.
"""

# Package marker.
