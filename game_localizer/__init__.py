"""
game_localizer — make iframe-wrapped HTML5 games playable offline.

Downloads the embedded game page, pulls its scripts, stylesheets, images and
CSS assets next to it, and rewrites the references to local paths.
"""

__version__ = "0.1.0"
