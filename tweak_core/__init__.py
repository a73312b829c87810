"""
Live numeric-parameter rewriter - writes slider values back into source files
"""
