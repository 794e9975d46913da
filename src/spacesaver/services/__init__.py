from .clone_service import CloneService, CopyCloneBackend, ReflinkCloneBackend

__all__ = ["CloneService", "CopyCloneBackend", "ReflinkCloneBackend"]
