from . import approvals, health, manage_data

__all__ = ["approvals", "health", "manage_data"]
