"""
contact_book: a command-line contact manager backed by a flat CSV file.

Subpackages:
  - config: settings loaded from environment variables / .env.
  - data: record schema, line codec and the file-backed record store.
  - search: exact-match search over raw rows.
  - shell: the interactive menu.
"""
