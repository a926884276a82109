"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='cantor-lang',
	version='0.1.0',
	packages=['cantor'],
	entry_points={
		'console_scripts': ["cantor = cantor.cmdline:main"],
	},
	license='MIT',
	description='A set/type engine where every set is a type: membership, countability, enumeration, and differentiation',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Education",
		"Topic :: Scientific/Engineering :: Mathematics",
		"Topic :: Software Development :: Interpreters",
		"Environment :: Console",
	],
	python_requires='>=3.11',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
