from setuptools import setup, find_namespace_packages

def parse_requirements(requirements):
    with open(requirements) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='school_backend',
    version='0.1.0',
    install_requires=requirements,
    extras_require={
        "test": parse_requirements("requirements-test.txt"),
    },
    packages=find_namespace_packages(include=["school_backend", "school_backend.*"]),
    entry_points={
        "console_scripts": [
            "school=school_backend.cli.cli:cli",
        ],
    }
)
