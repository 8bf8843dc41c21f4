"""
The MODEL layer contains pure data structures and the error taxonomy.
It has NO knowledge of the integrator or of the plotting backend.
"""
