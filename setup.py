import setuptools

setuptools.setup(
    name="photo_cards_client",
    version="0.1",
    author="yochi",
    author_email="pedrogush@gmail.com",
    description="Photo cards client: session, profile and card state kept in sync with the API",
    packages=["clients", "controllers", "repositories", "services", "utils"],
    py_modules=["main"],
    classifiers=["Programming Language :: Python :: 3", "Operating System :: OS Independent"],
    python_requires=">=3.11",
    install_requires=[
        "loguru",
        "curl_cffi",  # HTTP transport for the Auth and User/Card APIs
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["photo-cards=main:main"],
    },
)
