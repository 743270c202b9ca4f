"""
Processing pipelines
"""
