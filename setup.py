import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="stepopt",
    version="0.1.0",
    description="Single step numerical optimisation and root finding "
                "primitives.",
    install_requires=[
        'numpy', 'scipy'
    ],
    extras_require={
        'test': ['pytest']
    },
    keywords='optimisation root finding newton gauss-newton '
             'finite difference',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=['stepopt', 'stepopt.*']),
    python_requires='>=3.9',
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Topic :: Scientific/Engineering :: Mathematics"
    ]
)
