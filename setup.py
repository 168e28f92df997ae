"""Install the IJSDS submission core and editorial API packages."""

from setuptools import setup, find_packages

setup(
    name='ijsds-submission-core',
    version='0.1.0',
    package_dir={'': 'core'},
    packages=find_packages(where='core'),
    package_data={'ijsds.submission': ['templates/journal/*.html']},
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=[
        'flask>=2.2',
        'bleach>=6.0',
        'python-dateutil',
        'sqlalchemy>=1.4',
        'flask-sqlalchemy>=3.0',
        'celery>=5.2',
        'kombu>=5.2',
        'redis>=4.0',
        'requests>=2.25',
        'urllib3>=1.26',
        'retry==0.9.2',
        'pytz',
        'pyjwt>=2.0',
    ],
    extras_require={
        'test': ['pytest', 'mimesis'],
    },
    include_package_data=True
)
