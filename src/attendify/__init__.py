"""Attendify package.

Classroom attendance backend organised by feature modules (users, classes,
enrollments) with a thin Flask controller layer over service/repository layers.
"""

__version__ = "0.1.0"
