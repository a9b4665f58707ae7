# apps/interviews/__init__.py
"""
Interview approval and feedback workflow.
"""
