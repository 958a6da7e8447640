"""
chaosmeta - System Metadata Registry and Dependency-Resolution Engine.

Turns traced HTTP, RPC and database interaction records of a target system
into cached views used to pick fault-injection targets.
"""

__version__ = "1.0.0"
