"""
Result types shared by all opskit operations.
"""
