"""Domain layer — spans, inner types, traits, guards and errors.

This layer depends only on the standard library.
It must never import from parsing, compat, codegen, services, commands, or config.
"""
