import sys
from setuptools import setup, find_packages

'''
Notes: This is the setup file for the SysInventory report tool.
It defines the package metadata and dependencies required for installation.
'''
# Windows-only query backends; collectors degrade to section failures without them
extra_requirements = []
if sys.platform.startswith('win'):
    extra_requirements += ['pywin32', 'wmi']

setup(
    name = "sysinventory",
    version = "1.0.0",
    description= "SysInventory - Windows host inventory and security posture report",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.10',
    install_requires=[
        # Core
        "pydantic",
        "python-dotenv",
        "rich",

        # System
        "psutil",
    ] + extra_requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sysinventory = sysinventory.main:main",
        ],
    },
)
