"""
NOAA chart overlay preferences (enabled flag + selected layers) per map view.
"""
