"""
atlas_intake.intake

Contact-form intake package.

Responsibilities:
- Validate and sanitize raw form fields into a submission payload.
"""

# Package marker.
