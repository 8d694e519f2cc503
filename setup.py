import os

from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(__file__), "readme.md"), "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name='powerhub-server',
    version='1.0.0',
    license='MIT',
    description='Rents out power banks from docking stations, with stripe checkout and overdue enforcement.',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires='>=3.9',
    install_requires=[
        'aiohttp>=3.9',
        'aiohttp-cors',
        'aiosmtplib>=2.0',
        'marshmallow>=3.13,<4',
        'marshmallow-jsonschema',
        'qrcode[pil]',
        'sentry-sdk',
        'stripe>=8',
        'tortoise-orm>=0.19',
        'uvloop',
    ],
    extras_require={
        'test': [
            'faker',
            'pytest',
            'pytest-aiohttp>=1.0',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'powerhub=powerhub.cli:run',
            'powerhub-qr=powerhub.cli:generate_qr_codes',
        ],
    },
)
