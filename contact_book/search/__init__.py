"""
Linear, exact-match search over the contacts file.
"""
