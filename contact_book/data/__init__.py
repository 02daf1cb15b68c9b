"""
Contact records, the line codec and the file-backed record store.

Handles decoding and encoding of individual CSV lines, tolerant loading of the
whole file, and append-only persistence of new records.
"""
