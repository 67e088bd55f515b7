"""
Configuration package for the hostel allocation service.

Environment settings are loaded once and shared across the application.
"""

from hostel_allocator.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
