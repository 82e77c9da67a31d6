"""
CapToken Package

Core imports are lazily loaded so that importing a submodule does not pull
in the whole token stack. For direct module access, import from submodules:

    from captoken.tokens import GuardedToken
    from captoken.config import load_config
    from captoken.exceptions import CapTokenException
"""

__version__ = "0.1.0"


# Lazy imports keep `import captoken` cheap
def __getattr__(name):
    if name == 'GuardedToken':
        from .tokens import GuardedToken
        return GuardedToken
    elif name == 'load_config':
        from .config import load_config
        return load_config
    elif name == 'CapTokenException':
        from .exceptions import CapTokenException
        return CapTokenException
    raise AttributeError(f"module 'captoken' has no attribute {name!r}")

__all__ = ['GuardedToken', 'load_config', 'CapTokenException']
