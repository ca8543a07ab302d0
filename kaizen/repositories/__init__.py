"""레포지토리 패키지 — 카이젠 데이터 접근 계층.

Repository package — Query layer for users, ideas, notifications and
auth tokens. Repositories flush but never commit; each one is a module
level singleton built on BaseRepository.
"""
