"""Kitchen order intake and production queue service."""
