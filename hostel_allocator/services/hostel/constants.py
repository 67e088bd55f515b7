"""
Messages shared by the hostel inventory services.
"""

SUCCESS_HOSTEL_CREATED = "Hostel created successfully"
SUCCESS_HOSTEL_UPDATED = "Hostel updated successfully"
SUCCESS_HOSTEL_DELETED = "Hostel deleted successfully"
SUCCESS_ROOMS_ADDED = "Rooms added successfully"
SUCCESS_ROOMS_REMOVED = "Empty rooms removed"
SUCCESS_BEDS_ADDED = "Beds added successfully"
SUCCESS_BEDS_REMOVED = "Empty beds removed"
SUCCESS_BED_ASSIGNED = "Bed assigned successfully"
SUCCESS_BED_CLEARED = "Bed unassigned"

ERROR_HOSTEL_NAME_REQUIRED = "Hostel name is required"
ERROR_HOSTEL_NAME_TAKEN = "A hostel with this name already exists"

NOTICE_NO_EMPTY_ROOMS = "No empty rooms to remove; every room has an occupied bed"
NOTICE_NO_EMPTY_BEDS = "No empty beds to remove; every bed in this room is occupied"
NOTICE_PARTIAL_REMOVAL = "Only {removed} of {requested} requested could be removed"
