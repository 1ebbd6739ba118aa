"""
User interface package for the arena.

Console playback of battles and the interactive prompts of the command line.
"""
