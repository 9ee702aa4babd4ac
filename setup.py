# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="scriptnotify",
    version="1.0.0",
    description="Builds a script-path to author index and notifies authors about script comments",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["scriptnotify*"]),
    package_data={
        "scriptnotify.interface.locales": ["*.json"],
    },
    install_requires=[
        "requests>=2.28",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'scriptnotify=scriptnotify.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
