from hostel_allocator.repositories.registration.registration_repository import RegistrationRepository

__all__ = ["RegistrationRepository"]
