"""Sitestage - bilingual route registry, resolution engine and sitemap builder."""
