"""서비스 패키지 — 카이젠 비즈니스 규칙.

Service package — Idea workflow, notification fan-out, statistics,
authentication and user administration. Every service checks the caller's
capability before touching a repository.
"""
