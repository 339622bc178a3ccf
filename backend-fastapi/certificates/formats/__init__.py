# certificates/formats/__init__.py

from .decoder import MaterialDecoder

__all__ = [
    'MaterialDecoder'
]
