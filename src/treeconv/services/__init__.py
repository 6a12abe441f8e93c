"""Service layer — conversion use cases returning ServiceResult.

Services may import from domain, conversion, and infrastructure layers.
They must never import from commands or output.
"""
