"""
# BAML: __init__.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

BAML, a small bracketed markup language, with an HTML backend and a page-template engine.
"""
