# --- START OF FILE src/version.py ---
"""
Single source of truth for Mora Panel version and app information.
All other components should import from this module.
"""

__version__ = "0.4.0"
__app_name__ = "MoraPanel"
__app_description__ = "Root bridge between the Mora panel UI and the local mora daemon API."
__license__ = "GNU General Public License v3.0"

def get_version_info():
    """Return a dictionary with all version and app information."""
    return {
        "version": __version__,
        "app_name": __app_name__,
        "description": __app_description__,
        "license": __license__,
    }
