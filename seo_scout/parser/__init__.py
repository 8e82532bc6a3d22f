# seo_scout/parser/__init__.py
"""Разбор robots.txt, sitemap.xml и HTML-страниц."""
