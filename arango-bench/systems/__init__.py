"""
ArangoDB systems: one transport per wire protocol.
"""
