"""Data loading module for profile exports."""

from .loaders import load_profiles, profiles_from_frame

__all__ = ["load_profiles", "profiles_from_frame"]
