"""report-todo — find TODO comments that are not linked to a tracked issue."""

__version__ = "0.1.0"
