"""
Time-stepping engine: the Euler/PID simulator, the gain tuner and the
closed-form reference responses used to check them.
"""
