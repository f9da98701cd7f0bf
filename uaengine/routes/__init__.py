from .system import system_bp
from .ua import ua_bp

__all__ = ['system_bp', 'ua_bp']
