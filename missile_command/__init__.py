"""
Missile Command - defend a row of structures against falling projectiles.
"""

__version__ = "0.1.0"
