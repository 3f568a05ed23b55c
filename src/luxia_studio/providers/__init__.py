"""
Generation capability providers.

Concrete capabilities live here; the core only depends on the
contract in luxia_studio.capabilities.
"""

from luxia_studio.providers.gemini import GeminiProvider, build_gemini_registry

__all__ = [
    "GeminiProvider",
    "build_gemini_registry",
]
