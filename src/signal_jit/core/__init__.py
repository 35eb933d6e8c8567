"""
Core JIT preparation components: declaration models, reflection, parsing,
node construction and the transforms built on them.
"""
