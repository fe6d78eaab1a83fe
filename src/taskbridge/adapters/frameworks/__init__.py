"""Framework adapters exposing the bridge control surface.

The FastAPI adapter needs the ``fastapi`` extra; import it from
``taskbridge.adapters.frameworks.fastapi`` directly.
"""

from taskbridge.adapters.frameworks.asgi import create_asgi_app

__all__ = ["create_asgi_app"]
