"""
Role permission feature module.

Company-scoped feature access for the five staff roles: default seeding,
owner-managed feature grants and request-time feature gating.
"""
