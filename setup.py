from setuptools import setup, find_packages

setup(
    name='doiprovider',
    version='0.0.2.dev0',
    description='DOI registration for repository items through the EZID service',
    url='https://github.com/CenterForOpenScience/doiprovider',
    author='Center for Open Science',
    author_email='pypipackages@cos.io',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'requests>=2.20',
        'furl>=2.0',
        'pytz>=2014.9',
        'sentry-sdk>=1.0',
        'datacite>=1.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'responses',
            'factory_boy',
            'Faker',
            'lxml',
        ],
    },
    zip_safe=False
)
