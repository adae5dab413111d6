"""
promptstack - layered prompt composition

Builds structured prompts from weighted content trees and lets configuration
layers prepend, append, or fully override each document.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
