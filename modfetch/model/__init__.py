from .module import ModuleReference, ResolvedModule, VERSION_SEPARATOR

__all__ = ["ModuleReference", "ResolvedModule", "VERSION_SEPARATOR"]
