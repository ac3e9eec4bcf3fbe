"""Upload files to DoDo object storage and get stable direct links."""

__version__ = "1.0.0"
