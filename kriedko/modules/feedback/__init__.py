# kriedko/modules/feedback/__init__.py

"""
Customer Feedback Module

This module provides:
- Public feedback ingestion with rating normalization
- Lexicon sentiment scoring of free-text comments
- Aggregate statistics and a live Server-Sent Events stream
- Admin listing, search, export/import and deletion

Key Components:
- Storage: pluggable submission stores (file, Redis, SQL, memory)
- Services: ingestion, aggregation, sentiment, streaming, admin, forwarding
- Routers: public and admin API endpoints
"""
