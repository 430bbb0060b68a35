from setuptools import setup, find_packages

setup(
    name='subnetcheck',
    version='0.1.0',
    packages=find_packages(exclude=['subnetcheck.tests']),
    include_package_data=True,
    install_requires=[
        'typer',
        'fastapi',
        'uvicorn',
        'pydantic>=2',
        'pyyaml',
        'jsonschema',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'subnetcheck=subnetcheck.cli:app'
        ]
    },
    author='Your Name',
    description='Pre-deployment check that cluster interfaces carry compatible IPv4 subnets and correctly paired /31 links',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
