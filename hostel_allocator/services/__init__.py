"""
Service layer.

Every public service method returns a ServiceResult; domain errors raised
below this layer are converted at the method boundary.
"""
