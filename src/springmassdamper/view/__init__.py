"""
Rendering of trajectories to raster images (matplotlib, Agg).
"""
