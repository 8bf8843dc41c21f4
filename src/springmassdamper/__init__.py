"""
Spring-mass-damper system under PID control.
The simulation core is pure Python/NumPy; rendering lives in `view`.
"""
