from .access import AccessGuard, current_identity

__all__ = ["AccessGuard", "current_identity"]
