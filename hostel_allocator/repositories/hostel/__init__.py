from hostel_allocator.repositories.hostel.hostel_repository import HostelRepository

__all__ = ["HostelRepository"]
