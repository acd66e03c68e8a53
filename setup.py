from setuptools import setup, find_packages

setup(
    name='nixctl',
    version='0.1.0',
    packages=find_packages(exclude=['nixctl.tests']),
    include_package_data=True,
    install_requires=[
        'typer[all]',
        'python-dotenv',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'nixctl=nixctl.cli:app'
        ]
    },
    author='Your Name',
    description='A task-runner CLI for provisioning and redeploying NixOS/K3s cluster nodes',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
