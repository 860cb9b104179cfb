"""
slnmove.commands - CLI command implementations
"""
