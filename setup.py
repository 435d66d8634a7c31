from setuptools import setup

setup(
    name='products-catalog',
    version='0.1.0',
    packages=('catalog', 'catalog.api', 'dynamo_toolkit'),
    python_requires='>=3.10',

    install_requires=[
        'boto3>=1.40',
        'pydantic>=2.11',
        'pydantic-settings>=2.11',
        'fastapi>=0.115',
        'uvicorn>=0.30',
    ],
    extras_require={
        'test': [
            'pytest>=8.4.1',
            'parameterized>=0.9.0',
            'moto[dynamodb]>=5.1',
            'httpx>=0.27',
        ],
    },
    entry_points={
        'console_scripts': [
            'catalog-api=catalog.main:main',
        ],
    },
)
