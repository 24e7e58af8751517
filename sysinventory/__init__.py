"""
SysInventory - Windows host inventory report.
Collects OS, hardware, network, security and service state and prints it as a
sectioned console report.
"""
__version__ = "1.0.0"
