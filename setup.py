# setup.py
from setuptools import setup, find_packages

# Version is defined here to avoid import issues during build
__version__ = "1.0.0"

setup(
    name='sidebarctl',
    version=__version__,
    description='Finder sidebar editor - manage Favorites and sidebar sections via the shared file list.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='sidebarctl contributors',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'click>=8.2.0',
        'rich>=13.0.0',
        'PyYAML>=6.0',
        'pydantic>=2.0',
        'mac_alias>=2.2.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'sidebarctl = sidebarctl.cli:sidebarctl',
            'sidebarsections = sidebarctl.cli:sidebarsections',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: MacOS",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Desktop Environment",
        "Topic :: Utilities",
    ],
    python_requires='>=3.10',
    keywords='macos, finder, sidebar, favorites, sharedfilelist',
)
