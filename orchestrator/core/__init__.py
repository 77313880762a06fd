"""
Provider abstraction: the ChatProvider capability and the registry that
builds concrete providers from configuration.
"""
