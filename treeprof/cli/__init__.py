"""
Command-line interfaces for treeprof.
"""
