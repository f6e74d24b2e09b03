from .base_app_screen import BaseAppScreen

__all__ = ['BaseAppScreen']
