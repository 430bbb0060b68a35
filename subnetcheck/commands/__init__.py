from . import analyze, settings

__all__ = ['analyze', 'settings']
