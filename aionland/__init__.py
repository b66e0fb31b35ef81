"""Userland components: package manager, code editor and assistant, command assistant, build engine, compositor and text terminal."""

__version__ = "1.0.0"
__all__ = ["packages", "editor", "assist", "assistant", "devops", "compositor", "terminal"]