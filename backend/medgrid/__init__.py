"""
MedGrid hospital operations backend.
Patient admission, bed occupancy, billing status and live dashboard updates.
"""
__version__ = "1.0.0"
