"""Infrastructure layer — textual document codecs (JSON, YAML).

This layer depends on the domain tree and third-party codecs (ruamel.yaml).
It must never import from conversion, services, commands, or output.
"""
