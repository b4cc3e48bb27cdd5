from os.path import splitext, basename

from setuptools import setup, find_packages, glob

setup(
    name='ethsignin',
    version='0.1.0',
    project_urls={
        'EIP-4361': 'https://eips.ethereum.org/EIPS/eip-4361',
        'EIP-55': 'https://eips.ethereum.org/EIPS/eip-55',
    },
    packages=find_packages('src'),
    package_dir={'': 'src'},
    py_modules=[splitext(basename(path))[0] for path in glob.glob('src/*.py')],
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'abnf>=2.2,<2.9',
        'eth-account>=0.10',
        'eth-keys>=0.4',
        'eth-typing>=3.0',
        'eth-utils>=2.0',
        'pydantic>=2.0,<3',
        'typing-extensions>=4.0',
        'web3>=6.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'pyhumps',
            'python-dateutil',
        ],
    },
    license='MIT',
    description='Parse, serialize and verify Sign-In with Ethereum (EIP-4361) messages.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
