"""
Core engine: identifiers, registries, transition keys and the state machine.
"""
