from setuptools import setup

setup(
    name='pymetgen',
    version='0.1.0',
    packages=['pymetgen'],
    license='MIT',
    description='package for stochastic daily weather generation from monthly statistics',
    python_requires=">=3.9",
    install_requires=["numpy", "pandas", "scipy", "toml"],
    extras_require={"test": ["pytest"]}
)
