"""
Text Tools Pro extension project.
"""
