from .resolver import IdentityLookupError, IdentityResolver

__all__ = ["IdentityLookupError", "IdentityResolver"]
