# setup.py
from setuptools import setup, find_packages

setup(
    name="seo_scout",
    version="0.1.0",
    description="Асинхронный SEO-краулер и аудитор сайтов SEO Scout",
    packages=find_packages(exclude=("tests", "tests.*")),  # seo_scout и подпакеты
    package_data={"seo_scout.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=5.0",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23"],
        # рендеринг JavaScript через headless Chromium
        "browser": ["playwright>=1.40"],
    },
    entry_points={
        "console_scripts": ["seo-scout=seo_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
