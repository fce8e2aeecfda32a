from ui_loadtest import __version__

__all__ = ["__version__"]
