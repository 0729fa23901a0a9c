from setuptools import setup, find_packages

setup(
    name='releasesmith',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=[
        'requests',
        'pick',
        'PyYAML',
        'platformdirs',
        'rich',
        'packaging',
    ],
    extras_require={
        'test': [
            'pytest<9',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'releasesmith=releasesmith.cli:main',
        ],
    },
)
