"""
podreaper - deletes pods stuck in CrashLoopBackOff so their owners recreate them.
"""

__version__ = "0.1.0"
