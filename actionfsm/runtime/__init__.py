"""
Runtime support: contexts, concurrent hook dispatch, async machine and executor.
"""
