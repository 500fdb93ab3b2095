"""Core types, configuration, exceptions and logging for tokenledger."""
