# seo_scout/crawler/__init__.py
"""Обход сайта: фронтир, рендереры страниц и оркестратор обхода."""
