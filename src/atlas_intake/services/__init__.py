"""
atlas_intake.services

Service layer.

Responsibilities:
- Own transactions and cross-component flows (intake, status workflow).
"""

# Package marker.
