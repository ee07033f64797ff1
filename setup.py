from setuptools import find_packages
from setuptools import setup

from subhost import version


with open('requirements-minimal.txt') as f:
    minimal_reqs = f.read().splitlines()


setup(
    name='subhost',
    version=version,
    packages=find_packages(exclude=('test*',)),
    include_package_data=True,
    install_requires=minimal_reqs,
    extras_require={
        'testing': [
            'ephemeral-port-reserve',
            'gunicorn',
            'pytest',
            'requests',
        ],
    },
    license='Apache License 2.0',
    classifiers=(
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ),
    python_requires='>=3.10',
)
