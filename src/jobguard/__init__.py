"""Role and ownership based authorization for the job-board API."""

__version__ = "0.1.0"
