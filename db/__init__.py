"""
Database schema, placeholder data, and seeding.

Runtime HTTP access lives in the services. This package is for repo-level DB operations:
- Table definitions for the dashboard schema
- Placeholder dataset and the transactional seeder
"""
