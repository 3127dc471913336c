"""
User interface module for the RollForge dice engine.

This module provides the interactive console used to explore dice macros,
including prompts and the commands it understands.
"""
