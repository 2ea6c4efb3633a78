"""Service layer — generation logic returning ServiceResult.

Services may import from domain, parsing, codegen, frontend and config.
They must never import from commands or output.
"""
