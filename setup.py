from setuptools import setup, find_packages

setup(
    name='lk_flow',
    version='1.0.0',
    description='Dense Lucas-Kanade optical flow over frame sequences, with arrow overlays',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.21',
        'scipy>=1.7',
        'matplotlib>=3.4',
        'Pillow>=8.0',
        'scikit-image>=0.19',
    ],
    extras_require={
        'dev': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'lk-flow=lk_flow.cli:main',
        ],
    },
    test_suite='tests',
    tests_require=['pytest>=7.0'],
)
