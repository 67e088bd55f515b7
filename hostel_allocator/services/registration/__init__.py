from hostel_allocator.services.registration.registration_directory import (
    RegistrationDirectoryService,
)

__all__ = ["RegistrationDirectoryService"]
