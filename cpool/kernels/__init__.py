"""
Kernel layer.

Integer-only arithmetic shared by the pool entity. `cpool/kernels/python/`
holds the pure-Python kernels; they take and return plain ints and know
nothing about assets or chains.
"""
