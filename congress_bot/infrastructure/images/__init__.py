from .drive import DriveImageHost

__all__ = ["DriveImageHost"]
