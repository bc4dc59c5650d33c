from setuptools import setup, find_packages
import re

# Read version from hourscalc/__init__.py
with open('hourscalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='hours-calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
        'tzdata',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'hours-calc=hourscalc.cli.__main__:main',
            'hours-calc-mcp=hourscalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Pay period and overtime hour tracking tools.',
    python_requires='>=3.10',
)
