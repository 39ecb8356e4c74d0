"""Nova web server package."""
from nova.web_server.web_server import NovaWebServer

__all__ = ["NovaWebServer"]
