"""create-o3-app -- scaffold OpenMRS O3 frontend modules."""

__version__ = "1.0.0"
