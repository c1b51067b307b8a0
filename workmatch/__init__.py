"""WorkMatch: rank marketplace workers against a job posting."""

__version__ = "0.1.0"
