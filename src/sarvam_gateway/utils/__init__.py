"""
Utility Modules for sarvam-gateway.

    - timeit.py: Step timing for request logging
"""
