__version__ = "1.2.0"

# Avoid importing heavy submodules at top-level to prevent side effects
__all__ = ["API", "Secret", "__version__"]

def __getattr__(name):
    if name == "API":
        from .native.api import API
        return API
    if name == "Secret":
        from .core.models import Secret
        return Secret
    raise AttributeError(name)
