"""
Hostel allocation console backend.

Hostel/room/bed inventory, grouped applicant selection and bulk bed
allocation for approved on-campus event registrations.
"""

__version__ = "1.0.0"
