"""TutorHub session scheduling and booking core."""

__version__ = "1.0.0"
