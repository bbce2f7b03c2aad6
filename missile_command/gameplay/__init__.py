"""
Gameplay core for Missile Command.
NO UI DEPENDENCIES.
"""
