"""OpsDesk: approval workflow and authorization engine for departmental operations reporting."""

__version__ = "0.3.0"
