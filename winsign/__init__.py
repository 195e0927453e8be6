"""winsign - Authenticode signing step for build pipelines.

Stages a PFX certificate, imports it into the local machine store, and signs
every supported artifact under a folder with signtool.
"""

__version__ = "0.1.0"
__author__ = "winsign Contributors"

from winsign.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
