"""
Language-specific code generators.
"""

from .swift import SwiftGenerator, create_swift_generator

__all__ = ["SwiftGenerator", "create_swift_generator"]
