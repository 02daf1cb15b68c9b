"""
Interactive command-line front end for the contact manager.
"""
