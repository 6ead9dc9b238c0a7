"""
Authorization core.

Implements role-based access control across a two-level organization
hierarchy: the role model, the hierarchy resolver, and the access
decision engine consulted by every resource service.
"""
