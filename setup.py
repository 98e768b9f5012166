from setuptools import setup, find_packages
import re

# Read version from verolaskuri/__init__.py
with open('verolaskuri/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='verolaskuri',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'verolaskuri': ['config/tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'verolaskuri=verolaskuri.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Tax, prepayment and bank reconciliation tools for Finnish sole-trader doctors.',
    python_requires='>=3.10',
)
