"""
Infrastructure layer: introspection, scanning and configuration loading.
"""
