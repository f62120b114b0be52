from .metrics import VERSION

__version__ = VERSION.lstrip("v")
