from setuptools import setup, find_namespace_packages

setup(
    name='SynCast',
    version='1.0.0',
    description='Terminal podcast/RSS reader with folders, play history and favorites',
    python_requires='>=3.8',
    py_modules=['syncast_tui', 'storage'],
    packages=find_namespace_packages(include=['syncast', 'syncast.*']),
    install_requires=[
        'feedparser>=6.0',
        'requests>=2.25',
        'PyQt5>=5.15',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'syncast=syncast_tui:main',
        ],
    },
)
