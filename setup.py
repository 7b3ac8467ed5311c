import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            yield line


def modules():
    return [
        'ctx',
        'http_requests',
        'version',
    ]


def packages():
    return [
        'ci',
        'github',
        'release_notes',
    ]


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='release-notes-aggregator',
    version=version(),
    description='Aggregates release notes from GitHub releases and milestones',
    python_requires='>=3.11',
    py_modules=modules(),
    packages=packages(),
    install_requires=list(requirements()),
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'release-notes = release_notes.cli:main',
        ],
    },
)
